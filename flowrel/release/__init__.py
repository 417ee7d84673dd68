"""Release flow: version computation and the start/finish sequences."""

from __future__ import annotations

from flowrel.release.errors import ReleaseError
from flowrel.release.version import Version, VersionError, increment_tag, parse_version
from flowrel.release.workflow import DISCARD_PROMPT, ReleaseOutcome, ReleaseWorkflow

__all__ = [
    "DISCARD_PROMPT",
    "ReleaseError",
    "ReleaseOutcome",
    "ReleaseWorkflow",
    "Version",
    "VersionError",
    "increment_tag",
    "parse_version",
]
