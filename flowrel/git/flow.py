"""git-flow release commands.

Thin wrapper over the ``git flow release`` extension. ``start`` branches
``release/<version>`` off the development line; ``finish`` merges it into
trunk and development, tags trunk with ``<version>`` and deletes the
release branch.
"""

from __future__ import annotations

from flowrel.core.result import Err, Ok, Result
from flowrel.git.repository import GitError, Repository

__all__ = ["GitFlow"]


class GitFlow:
    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def release_start(self, version: str) -> Result[str, GitError]:
        return self._flow(["release", "start", version])

    def release_finish(self, version: str, *, message: str) -> Result[str, GitError]:
        """Finish the release non-interactively, using ``message`` for the tag."""
        return self._flow(["release", "finish", "-m", message, version])

    def _flow(self, args: list[str]) -> Result[str, GitError]:
        result = self.repo.git(["flow", *args], mutating=True)
        match result:
            case Err(e):
                return Err(GitError.from_command(e))
            case Ok(stdout):
                return Ok(stdout.strip())
