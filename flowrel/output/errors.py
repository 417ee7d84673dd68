"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flowrel.core.errors import ErrorCode
from flowrel.output.console import Style
from flowrel.release.errors import ReleaseError

if TYPE_CHECKING:
    from flowrel.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error, with the failed command's output if any."""
    console.error(error.message)
    if error.git is not None:
        stdout = error.git.stdout.strip()
        stderr = error.git.stderr.strip()
        if stdout:
            console.print(f"stdout: {stdout}", Style.DIM)
        if stderr:
            console.print(f"stderr: {stderr}", Style.DIM)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    """Get exit code for a release error.

    A declined prompt, a bad tag and a failed command all stop the run the
    same way, so they share one code.
    """
    return int(ErrorCode.FAILURE)
