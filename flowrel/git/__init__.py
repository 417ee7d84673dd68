"""Git operations module.

Usage:
    from flowrel.git import GitFlow, Repository

    repo = Repository(Path("/path/to/repo"))
    print(repo.last_tag())
    GitFlow(repo).release_start("1.3.0")
"""

from flowrel.git.flow import GitFlow
from flowrel.git.repository import (
    BASELINE_TAG,
    GitError,
    Repository,
)

__all__ = [
    "BASELINE_TAG",
    "GitError",
    "GitFlow",
    "Repository",
]
