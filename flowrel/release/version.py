from __future__ import annotations

import re
from dataclasses import dataclass

from flowrel.core.config import DEFAULT_MINOR_ROLLOVER
from flowrel.core.result import Err, Ok, Result


_VERSION_RE = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)$")


@dataclass(frozen=True, slots=True)
class VersionError:
    tag: str
    message: str


@dataclass(frozen=True, slots=True, order=True)
class Version:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def next_release(self, rollover: int = DEFAULT_MINOR_ROLLOVER) -> "Version":
        """Next minor release; minor wraps into a new major at ``rollover``.

        Patch is always reset: 1.2.3 -> 1.3.0, 1.9.0 -> 2.0.0.
        """
        minor = self.minor + 1
        if minor >= rollover:
            return Version(self.major + 1, 0, 0)
        return Version(self.major, minor, 0)


def parse_version(tag: str) -> Result[Version, VersionError]:
    text = tag.strip()
    m = _VERSION_RE.match(text)
    if m is None:
        return Err(VersionError(tag=tag, message=f"tag is not MAJOR.MINOR.PATCH: {text!r}"))
    return Ok(Version(int(m.group(1)), int(m.group(2)), int(m.group(3))))


def increment_tag(tag: str, rollover: int = DEFAULT_MINOR_ROLLOVER) -> Result[str, VersionError]:
    return parse_version(tag).map(lambda v: str(v.next_release(rollover)))
