"""Error types for the release flow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from flowrel.git.repository import GitError


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    ``git`` carries the failed command with its captured output when the
    error comes from a git invocation.
    """

    kind: Literal[
        "aborted",
        "command_failed",
        "invalid_tag",
    ]
    message: str
    hint: str | None = None
    git: GitError | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message

    @classmethod
    def from_git(cls, error: GitError) -> ReleaseError:
        return cls(
            kind="command_failed",
            message=f"Error running command: {error.command}",
            git=error,
        )
