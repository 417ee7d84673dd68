from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from flowrel.core.result import Err, Ok, Result
from flowrel.platform.process import CommandError


def _no_tags() -> Result[str, CommandError]:
    return Err(
        CommandError(
            command=("git", "describe", "--tags", "--abbrev=0"),
            returncode=128,
            stdout="",
            stderr="fatal: No names found, cannot describe anything.",
        )
    )


@dataclass
class FakeGit:
    """Scripted stand-in for the process runner.

    Responses are keyed by the git argv (without the leading "git").
    Unscripted commands succeed with empty output, except `describe`,
    which fails as in a repository without tags.
    """

    responses: dict[tuple[str, ...], Result[str, CommandError]] = field(default_factory=dict)
    calls: list[tuple[str, ...]] = field(default_factory=list)
    timeouts: list[float | None] = field(default_factory=list)
    cwds: list[Path] = field(default_factory=list)
    created_branches: set[str] = field(default_factory=set)

    def __call__(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[str, CommandError]:
        args = tuple(cmd[1:])
        self.calls.append(args)
        self.timeouts.append(timeout)
        self.cwds.append(cwd)

        if args in self.responses:
            return self.responses[args]

        # Emulate git-flow creating the branch so a second run sees it
        if args[:3] == ("flow", "release", "start"):
            self.created_branches.add(f"release/{args[3]}")
        if args[:2] == ("branch", "--list"):
            name = args[2]
            return Ok(f"  {name}\n" if name in self.created_branches else "")
        if args[:1] == ("describe",):
            return _no_tags()
        return Ok("")

    def respond(self, *args: str, stdout: str = "") -> None:
        self.responses[args] = Ok(stdout)

    def fail(self, *args: str, returncode: int = 1, stdout: str = "", stderr: str = "") -> None:
        self.responses[args] = Err(
            CommandError(
                command=("git", *args),
                returncode=returncode,
                stdout=stdout,
                stderr=stderr,
            )
        )

    @property
    def commands(self) -> list[str]:
        return [" ".join(c) for c in self.calls]


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()
