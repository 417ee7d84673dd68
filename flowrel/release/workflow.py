"""Release workflow: resolve the next version, start and finish its branch.

The run is one pass with no retries and no rollback:

    dirty tree?  -> ask to discard, or abort
    last tag     -> next version
    branch there -> skip start, else start + push
    --close      -> finish, push trunk, development and the tag

Any failed git command stops the run where it is. A rerun picks up from
the repository state (an existing release branch is reused).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial

from flowrel.core.config import Config
from flowrel.core.result import Err, Ok, Result
from flowrel.git.flow import GitFlow
from flowrel.git.repository import GitError, Repository
from flowrel.output.console import ConsoleProtocol, Style
from flowrel.release.errors import ReleaseError
from flowrel.release.version import increment_tag

__all__ = [
    "DISCARD_PROMPT",
    "ReleaseOutcome",
    "ReleaseWorkflow",
]

DISCARD_PROMPT = (
    "There are uncommitted changes in the repository. Discard them and proceed? (y/n): "
)

_YES_ANSWERS = frozenset({"y", "yes"})

type _Step = Callable[[], Result[str, GitError]]


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    """What a release run did."""

    last_tag: str
    version: str
    branch: str
    started: bool
    finished: bool
    discarded_changes: bool = False


class ReleaseWorkflow:
    def __init__(
        self,
        *,
        repo: Repository,
        config: Config,
        console: ConsoleProtocol,
        read_line: Callable[[str], str] | None = None,
        assume_yes: bool = False,
    ) -> None:
        """
        Args:
            repo: Working copy to release from
            config: Branch names, rollover and finish message
            console: Where decisions are reported
            read_line: Blocking prompt returning the operator's answer;
                None when no operator is available
            assume_yes: Discard local changes without asking
        """
        self._repo = repo
        self._flow = GitFlow(repo)
        self._config = config
        self._console = console
        self._read_line = read_line
        self._assume_yes = assume_yes

    def run(self, *, close: bool) -> Result[ReleaseOutcome, ReleaseError]:
        """Run the whole release; ``close`` also finishes it."""
        clean = self.ensure_clean()
        if isinstance(clean, Err):
            return clean
        discarded = clean.value

        resolved = self.resolve_version()
        if isinstance(resolved, Err):
            return resolved
        last_tag, version = resolved.value

        branch = self._config.branches.release_branch(version)
        started = False
        if not self._repo.branch_exists(branch):
            start = self.start_release(version)
            if isinstance(start, Err):
                return start
            started = True
            self._console.success(f"Started release {version}")
        else:
            self._console.print(f"Release branch {branch} already exists.", Style.WARNING)

        if close:
            finish = self.finish_release(version)
            if isinstance(finish, Err):
                return finish
            self._console.success(f"Finished and pushed release {version}")
        else:
            self._console.print(
                "Release started but not finished. Use --close to finish and push.",
                Style.INFO,
            )

        return Ok(
            ReleaseOutcome(
                last_tag=last_tag,
                version=version,
                branch=branch,
                started=started,
                finished=close,
                discarded_changes=discarded,
            )
        )

    def ensure_clean(self) -> Result[bool, ReleaseError]:
        """Make sure the working tree is clean, asking before discarding.

        Returns:
            Ok(True) if local changes were discarded, Ok(False) if the
            tree was already clean.
        """
        status = self._repo.has_uncommitted_changes()
        if isinstance(status, Err):
            return Err(ReleaseError.from_git(status.error))
        if not status.value:
            return Ok(False)

        if not self._confirm_discard():
            return Err(
                ReleaseError(
                    kind="aborted",
                    message="Aborting release process due to uncommitted changes.",
                    hint="Commit or stash your changes, or answer 'y' to discard them.",
                )
            )

        steps = self._run_steps([self._repo.reset_hard, self._repo.clean_untracked])
        if isinstance(steps, Err):
            return steps
        if self._repo.dry_run:
            self._console.print("Uncommitted changes would be discarded (dry run).", Style.WARNING)
        else:
            self._console.print("Uncommitted changes discarded.", Style.WARNING)
        return Ok(True)

    def resolve_version(self) -> Result[tuple[str, str], ReleaseError]:
        """Return (last tag, next version)."""
        last_tag = self._repo.last_tag()
        self._console.print(f"Last tag: {last_tag}")

        match increment_tag(last_tag, self._config.version.minor_rollover):
            case Err(e):
                return Err(
                    ReleaseError(
                        kind="invalid_tag",
                        message=f"Cannot compute the next version: {e.message}",
                        hint="Release tags must look like MAJOR.MINOR.PATCH, e.g. 1.2.0",
                    )
                )
            case Ok(version):
                self._console.print(f"New release version: {version}", Style.BOLD)
                return Ok((last_tag, version))

    def start_release(self, version: str) -> Result[None, ReleaseError]:
        """Sync trunk and development, start the release branch and push it."""
        branches = self._config.branches
        return self._run_steps(
            [
                *self._sync_steps(branches.trunk),
                *self._sync_steps(branches.development),
                partial(self._flow.release_start, version),
                partial(self._repo.push, branches.release_branch(version)),
            ]
        )

    def finish_release(self, version: str) -> Result[None, ReleaseError]:
        """Finish the release branch and push trunk, development and the tag."""
        branches = self._config.branches
        message = self._config.finish.render_message(version)
        return self._run_steps(
            [
                *self._sync_steps(branches.trunk),
                *self._sync_steps(branches.development),
                *self._sync_steps(branches.release_branch(version)),
                partial(self._flow.release_finish, version, message=message),
                partial(self._repo.checkout, branches.trunk),
                partial(self._repo.push, branches.trunk),
                partial(self._repo.checkout, branches.development),
                partial(self._repo.push, branches.development),
                partial(self._repo.push_tag, version),
            ]
        )

    def _confirm_discard(self) -> bool:
        if self._assume_yes:
            return True
        if self._read_line is None:
            self._console.error("Cannot prompt for confirmation (no prompt available)")
            return False
        answer = self._read_line(DISCARD_PROMPT)
        return answer.strip().lower() in _YES_ANSWERS

    def _sync_steps(self, branch: str) -> list[_Step]:
        return [partial(self._repo.checkout, branch), partial(self._repo.pull, branch)]

    def _run_steps(self, steps: list[_Step]) -> Result[None, ReleaseError]:
        for step in steps:
            result = step()
            if isinstance(result, Err):
                return Err(ReleaseError.from_git(result.error))
        return Ok(None)
