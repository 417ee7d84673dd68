"""Typed configuration loading and access.

The config file is optional. Without one, the release flow uses the
git-flow defaults: ``master`` as trunk, ``development`` as the development
line, ``release/`` branches and the ``origin`` remote.

Example ``.flowrel.toml``::

    [branches]
    trunk = "main"
    development = "develop"

    [timeouts]
    git_network = 300
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_int, get_str, get_table

__all__ = [
    "BranchesConfig",
    "Config",
    "ConfigError",
    "CONFIG_FILE_NAME",
    "FinishConfig",
    "TimeoutsConfig",
    "VersionConfig",
    "load_config",
    # Defaults
    "DEFAULT_TRUNK_BRANCH",
    "DEFAULT_DEVELOPMENT_BRANCH",
    "DEFAULT_RELEASE_PREFIX",
    "DEFAULT_REMOTE",
    "DEFAULT_MINOR_ROLLOVER",
    "DEFAULT_FINISH_MESSAGE",
]

CONFIG_FILE_NAME = ".flowrel.toml"

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULT_TRUNK_BRANCH = "master"
DEFAULT_DEVELOPMENT_BRANCH = "development"
DEFAULT_RELEASE_PREFIX = "release/"
DEFAULT_REMOTE = "origin"

# Minor wraps into the next major once it reaches this value (1.9.0 -> 2.0.0)
DEFAULT_MINOR_ROLLOVER = 10

DEFAULT_FINISH_MESSAGE = "Release {version}"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class BranchesConfig:
    """Long-lived branch names and the release branch prefix."""

    trunk: str = DEFAULT_TRUNK_BRANCH
    development: str = DEFAULT_DEVELOPMENT_BRANCH
    release_prefix: str = DEFAULT_RELEASE_PREFIX

    def release_branch(self, version: str) -> str:
        return f"{self.release_prefix}{version}"


@dataclass(frozen=True, slots=True)
class VersionConfig:
    minor_rollover: int = DEFAULT_MINOR_ROLLOVER


@dataclass(frozen=True, slots=True)
class FinishConfig:
    """Release finish options.

    Attributes:
        message: Tag/merge message; ``{version}`` is replaced by the version.
    """

    message: str = DEFAULT_FINISH_MESSAGE

    def render_message(self, version: str) -> str:
        return self.message.replace("{version}", version)


@dataclass(frozen=True, slots=True)
class TimeoutsConfig:
    """Per-command timeouts in seconds. None means wait indefinitely.

    Attributes:
        git: Local git commands (status, checkout, describe, flow).
        git_network: Commands that talk to the remote (pull, push).
    """

    git: float | None = None
    git_network: float | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    branches: BranchesConfig = field(default_factory=BranchesConfig)
    remote: str = DEFAULT_REMOTE
    version: VersionConfig = field(default_factory=VersionConfig)
    finish: FinishConfig = field(default_factory=FinishConfig)
    timeouts: TimeoutsConfig = field(default_factory=TimeoutsConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        branches: StrDict = get_table(data, "branches") or {}
        remote: StrDict = get_table(data, "remote") or {}
        version: StrDict = get_table(data, "version") or {}
        finish: StrDict = get_table(data, "finish") or {}
        timeouts: StrDict = get_table(data, "timeouts") or {}

        rollover = get_int(version, "rollover")
        if rollover is None or rollover < 1:
            rollover = DEFAULT_MINOR_ROLLOVER

        return cls(
            branches=BranchesConfig(
                trunk=get_str(branches, "trunk") or DEFAULT_TRUNK_BRANCH,
                development=get_str(branches, "development") or DEFAULT_DEVELOPMENT_BRANCH,
                release_prefix=get_str(branches, "release_prefix") or DEFAULT_RELEASE_PREFIX,
            ),
            remote=get_str(remote, "name") or DEFAULT_REMOTE,
            version=VersionConfig(minor_rollover=rollover),
            finish=FinishConfig(message=get_str(finish, "message") or DEFAULT_FINISH_MESSAGE),
            timeouts=TimeoutsConfig(
                git=_positive(get_float(timeouts, "git")),
                git_network=_positive(get_float(timeouts, "git_network")),
            ),
        )


def _positive(value: float | None) -> float | None:
    if value is None or value <= 0:
        return None
    return value


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except IsADirectoryError:
        return Err(ConfigError(f"Config path is a directory: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
