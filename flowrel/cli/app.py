from __future__ import annotations

from pathlib import Path

import click
import typer
from typer.core import TyperCommand

from flowrel import __version__
from flowrel.cli.context import build_context
from flowrel.core.errors import ErrorCode
from flowrel.core.result import Err, Ok
from flowrel.output.errors import print_release_error, release_error_exit_code
from flowrel.release.workflow import ReleaseWorkflow

USAGE = "Usage: flowrel <repo-path> [--close]"


app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def _read_line(question: str) -> str:
    return typer.prompt(question, default="", show_default=False, prompt_suffix="")


class _ReleaseCommand(TyperCommand):
    """Report argument errors with the same exit status as every other failure."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = int(ErrorCode.FAILURE)
            raise


@app.command(cls=_ReleaseCommand)
def release(
    repo_path: Path | None = typer.Argument(
        None,
        metavar="REPO_PATH",
        show_default=False,
        help="Path to the repository working copy.",
    ),
    close: bool = typer.Option(
        False,
        "--close",
        help="Finish the release: merge, tag, push trunk, development and the tag.",
    ),
    yes: bool = typer.Option(
        False, "--yes", "-y", help="Discard uncommitted changes without prompting."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print commands that change the repository instead of running them."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo every git command."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: <repo>/.flowrel.toml when present).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Start the next release branch and optionally finish it."""
    if repo_path is None:
        typer.echo(USAGE, err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    ctx = build_context(repo_path, config_path=config, verbose=verbose, dry_run=dry_run)
    workflow = ReleaseWorkflow(
        repo=ctx.repo,
        config=ctx.config,
        console=ctx.console,
        read_line=_read_line,
        assume_yes=yes,
    )

    match workflow.run(close=close):
        case Err(e):
            print_release_error(e, ctx.console)
            raise typer.Exit(code=release_error_exit_code(e))
        case Ok(_):
            pass


def main() -> None:
    app()
