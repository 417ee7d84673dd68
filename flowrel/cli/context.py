from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from flowrel.core.config import CONFIG_FILE_NAME, Config, load_config
from flowrel.core.errors import ErrorCode
from flowrel.core.result import Err
from flowrel.git.repository import Repository
from flowrel.output.console import ConsoleProtocol, RichConsole, Style
from flowrel.platform.process import CommandRunner


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo: Repository
    config: Config
    console: ConsoleProtocol


def resolve_repo_path(repo_path: Path) -> Path:
    try:
        root = repo_path.expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid repository path: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    if not root.is_dir():
        typer.echo(f"error: repository path is not a directory: {root}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))
    return root


def resolve_config(root: Path, config_path: Path | None) -> Config:
    """Load --config, else <repo>/.flowrel.toml if present, else defaults."""
    if config_path is None:
        config_path = root / CONFIG_FILE_NAME
        if not config_path.is_file():
            return Config()

    result = load_config(config_path.expanduser())
    if isinstance(result, Err):
        typer.echo(f"error: {result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))
    return result.value


def build_context(
    repo_path: Path,
    *,
    config_path: Path | None = None,
    verbose: bool = False,
    dry_run: bool = False,
    runner: CommandRunner | None = None,
    console: ConsoleProtocol | None = None,
) -> CLIContext:
    root = resolve_repo_path(repo_path)
    config = resolve_config(root, config_path)
    out = console or RichConsole()

    def trace(command: str) -> None:
        out.print(f"$ {command}", Style.DIM)

    repo = Repository(
        root,
        remote=config.remote,
        runner=runner,
        timeouts=config.timeouts,
        trace=trace if verbose or dry_run else None,
        dry_run=dry_run,
    )
    return CLIContext(repo=repo, config=config, console=out)
