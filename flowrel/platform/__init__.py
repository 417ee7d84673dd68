"""Platform abstraction layer."""

from .process import (
    CommandError,
    CommandRunner,
    run,
)

__all__ = [
    "CommandError",
    "CommandRunner",
    "run",
]
