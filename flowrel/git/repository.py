"""Git repository abstraction.

This module provides the Repository class for the handful of git
operations a release needs. Operations that must succeed return Result
types; queries whose failure means "nothing there" (no tag, no branch)
return a plain fallback value instead.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.has_uncommitted_changes():
        case Ok(True):
            print("working tree is dirty")
        case Ok(False):
            print("clean")
        case Err(e):
            print(f"Error: {e.message}")

    print(repo.last_tag())  # "0.0.0" when the repo has no tags
"""

from __future__ import annotations

import shlex
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from flowrel.core.config import DEFAULT_REMOTE, TimeoutsConfig
from flowrel.core.result import Err, Ok, Result
from flowrel.platform.process import CommandError, CommandRunner
from flowrel.platform.process import run as run_process

__all__ = [
    "BASELINE_TAG",
    "GitError",
    "Repository",
]

# Reported as the last tag when the history has none yet
BASELINE_TAG = "0.0.0"

_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone"})


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: Full command line that failed
        message: Short error message
        returncode: Process return code
        stdout: Captured standard output
        stderr: Captured standard error
    """

    command: str
    message: str
    returncode: int = 1
    stdout: str = ""
    stderr: str = ""

    @classmethod
    def from_command(cls, error: CommandError) -> GitError:
        subcommand = error.command[1] if len(error.command) > 1 else "git"
        return cls(
            command=error.display,
            message=error.stderr.strip() or error.stdout.strip() or f"git {subcommand} failed",
            returncode=error.returncode,
            stdout=error.stdout,
            stderr=error.stderr,
        )


class Repository:
    """A local git working copy.

    Attributes:
        path: Path to the working copy root
        remote: Remote used for pull and push
        dry_run: When True, commands that modify the repository or the
            remote are traced but not executed
    """

    def __init__(
        self,
        path: Path,
        *,
        remote: str = DEFAULT_REMOTE,
        runner: CommandRunner | None = None,
        timeouts: TimeoutsConfig | None = None,
        trace: Callable[[str], None] | None = None,
        dry_run: bool = False,
    ) -> None:
        """Initialize repository.

        Args:
            path: Path to the working copy root
            remote: Remote name for pull/push
            runner: Command runner (defaults to a real subprocess)
            timeouts: Command timeouts (defaults to no limit)
            trace: Called with every git command line before it runs
            dry_run: Skip commands that change state
        """
        self.path = path
        self.remote = remote
        self.dry_run = dry_run
        self._runner: CommandRunner = runner or run_process
        self._timeouts = timeouts or TimeoutsConfig()
        self._trace = trace

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def last_tag(self) -> str:
        """Most recent tag reachable from HEAD.

        Returns BASELINE_TAG when there is no tag (describe fails).
        """
        result = self.git(["describe", "--tags", "--abbrev=0"])
        match result:
            case Ok(stdout):
                return stdout.strip() or BASELINE_TAG
            case Err(_):
                return BASELINE_TAG

    def status_porcelain(self) -> Result[str, GitError]:
        """Raw `git status --porcelain` output, trimmed."""
        result = self.git(["status", "--porcelain"])
        match result:
            case Err(e):
                return Err(GitError.from_command(e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def has_uncommitted_changes(self) -> Result[bool, GitError]:
        """True if the working tree has modified, staged or untracked files."""
        return self.status_porcelain().map(lambda out: out != "")

    def branch_exists(self, name: str) -> bool:
        """Check a local branch by name.

        The listing is matched as plain text, so any listed branch whose
        name contains ``name`` counts. A failed listing counts as absent.
        """
        result = self.git(["branch", "--list", name])
        match result:
            case Ok(stdout):
                return name in stdout
            case Err(_):
                return False

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def checkout(self, branch: str) -> Result[str, GitError]:
        return self._checked(["checkout", branch], mutating=True)

    def pull(self, branch: str) -> Result[str, GitError]:
        """Pull ``branch`` from the configured remote into the current branch."""
        return self._checked(["pull", self.remote, branch], mutating=True)

    def push(self, ref: str) -> Result[str, GitError]:
        return self._checked(["push", self.remote, ref], mutating=True)

    def push_tag(self, tag: str) -> Result[str, GitError]:
        """Push a single tag by its full ref name."""
        return self.push(f"refs/tags/{tag}")

    def reset_hard(self) -> Result[str, GitError]:
        return self._checked(["reset", "--hard"], mutating=True)

    def clean_untracked(self) -> Result[str, GitError]:
        """Remove untracked files and directories (ignored files are kept)."""
        return self._checked(["clean", "-fd"], mutating=True)

    # -------------------------------------------------------------------------
    # Low level
    # -------------------------------------------------------------------------

    def git(self, args: list[str], *, mutating: bool = False) -> Result[str, CommandError]:
        """Run a git command in this repository.

        In dry-run mode a mutating command is only traced and reports
        success with empty output.
        """
        cmd = ["git", *args]
        if self._trace is not None:
            self._trace(shlex.join(cmd))
        if mutating and self.dry_run:
            return Ok("")

        command = args[0] if args else ""
        timeout = (
            self._timeouts.git_network if command in _NETWORK_COMMANDS else self._timeouts.git
        )
        return self._runner(cmd, cwd=self.path, timeout=timeout)

    def _checked(self, args: list[str], *, mutating: bool = False) -> Result[str, GitError]:
        result = self.git(args, mutating=mutating)
        match result:
            case Err(e):
                return Err(GitError.from_command(e))
            case Ok(stdout):
                return Ok(stdout.strip())
