"""
Configuration file parsing.

Settings come from (lowest to highest precedence) the user-level config file,
the project config file found by walking up from the working directory, and
the BUILDTREE_LOG_LEVEL environment variable. The --log-level flag is applied
on top of these by the CLI.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import platformdirs
import yaml

from buildtree.logging import LogLevel, parse_log_level

__all__ = [
    "PROJECT_CONFIG_NAME",
    "LOG_LEVEL_ENV_VAR",
    "Settings",
    "ConfigError",
    "get_user_config_path",
    "find_project_config",
    "parse_config_file",
    "load_settings",
]

PROJECT_CONFIG_NAME = ".buildtree.yml"
LOG_LEVEL_ENV_VAR = "BUILDTREE_LOG_LEVEL"


class ConfigError(Exception):
    """Raised when a configuration file is invalid."""

    pass


@dataclass
class Settings:
    """Effective configuration.

    Attributes:
        log_level: Initial log level, None when not configured
        global_deps: Extra files every staleness check depends on
    """

    log_level: Optional[LogLevel] = None
    global_deps: list[str] = field(default_factory=list)

    def merge(self, other: Optional["Settings"]) -> "Settings":
        """Settings with `other` layered on top: its log level wins, deps accumulate."""
        if other is None:
            return self
        return Settings(
            log_level=other.log_level if other.log_level is not None else self.log_level,
            global_deps=self.global_deps + other.global_deps,
        )


def get_user_config_path() -> Path:
    """
    Get the path to the user-level configuration file.

    Uses platformdirs to determine the user config directory for the current
    platform, then appends 'config.yml'.

    Returns:
        Path to the user config file (may not exist)
    """
    config_dir = Path(platformdirs.user_config_dir("buildtree"))
    return config_dir / "config.yml"


def find_project_config(start_dir: Path) -> Optional[Path]:
    """
    Walk up the directory tree from start_dir to find .buildtree.yml.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to the config file if found, None otherwise
    """
    try:
        current = start_dir.resolve()
    except (OSError, RuntimeError):
        return None

    while True:
        config_path = current / PROJECT_CONFIG_NAME
        try:
            if config_path.is_file():
                return config_path
        except OSError:
            # Unreadable directory, keep walking up
            pass

        parent = current.parent
        if parent == current:
            return None
        current = parent


def parse_config_file(path: Path) -> Optional[Settings]:
    """
    Parse a buildtree configuration file.

    Empty files are valid. Relative paths in global_deps are resolved against
    the directory containing the config file.

    Args:
        path: Path to the configuration file

    Returns:
        Settings from the file, or None if the file doesn't exist or is empty

    Raises:
        ConfigError: If the file cannot be read or has an invalid structure

    Config File Example:
        ```yaml
        log_level: debug
        global_deps:
          - pyproject.toml
          - toolchain/versions.txt
        ```
    """
    if not path.exists():
        return None

    try:
        content = path.read_text()
    except OSError as e:
        raise ConfigError(f"Error reading config file '{path}': {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML in config file '{path}': {e}") from e

    if data is None:
        return None

    if not isinstance(data, dict):
        raise ConfigError(f"Error in config file '{path}': top level must be a mapping")

    unknown = sorted(set(data) - {"log_level", "global_deps"})
    if unknown:
        raise ConfigError(
            f"Error in config file '{path}': unknown key(s): {', '.join(map(str, unknown))}"
        )

    log_level = None
    if "log_level" in data:
        if not isinstance(data["log_level"], str):
            raise ConfigError(f"Error in config file '{path}': Field 'log_level' must be a string")
        try:
            log_level = parse_log_level(data["log_level"])
        except ValueError as e:
            raise ConfigError(f"Error in config file '{path}': {e}") from e

    deps = data.get("global_deps", [])
    if not isinstance(deps, list) or not all(isinstance(dep, str) for dep in deps):
        raise ConfigError(
            f"Error in config file '{path}': Field 'global_deps' must be a list of strings"
        )

    base = path.parent
    global_deps = [dep if os.path.isabs(dep) else str(base / dep) for dep in deps]

    return Settings(log_level=log_level, global_deps=global_deps)


def load_settings(start_dir: Optional[Path] = None, environ: Optional[dict] = None) -> Settings:
    """
    Load the effective settings.

    Args:
        start_dir: Directory where the project config search starts (default: cwd)
        environ: Environment to read overrides from (default: os.environ)

    Raises:
        ConfigError: If a config file or the environment override is invalid
    """
    if start_dir is None:
        start_dir = Path.cwd()
    if environ is None:
        environ = dict(os.environ)

    settings = Settings().merge(parse_config_file(get_user_config_path()))

    project_config = find_project_config(start_dir)
    if project_config is not None:
        settings = settings.merge(parse_config_file(project_config))

    env_level = environ.get(LOG_LEVEL_ENV_VAR)
    if env_level:
        try:
            settings.log_level = parse_log_level(env_level)
        except ValueError as e:
            raise ConfigError(f"Invalid {LOG_LEVEL_ENV_VAR}: {e}") from e

    return settings
