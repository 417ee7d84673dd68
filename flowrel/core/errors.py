"""Exit codes for the release command.

The release run is a single pass: it either completes or stops at the
first failure. Every failure (bad arguments, a declined prompt, a failed
git command) exits with the same non-zero status.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. The values are part of the CLI contract."""

    OK = 0
    FAILURE = 1
