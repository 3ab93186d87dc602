"""Configuration management for the CLI."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "file": None,
    "interact": False,
    "http": {
        "timeout": 10.0,
        "user_agent": None,
    },
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Config:
    """Configuration management for the CLI application."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ValueError(f"Error reading config file: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return data

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the default configuration file paths to check."""
        paths = []

        # User config
        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        paths.append(xdg_config_home / "bibadd" / "config.yaml")

        # Project config
        paths.append(Path(".bibadd.yaml"))
        paths.append(Path("bibadd.yaml"))

        return paths

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = _deep_merge(result, config)
        return result


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from files and environment variables.

    Default locations are merged in order, then ``path`` if given, then
    environment overrides.
    """
    config = Config.merge_configs(DEFAULT_CONFIG)

    for default_path in Config.get_config_paths():
        if default_path.exists():
            try:
                config = Config.merge_configs(config, Config.from_file(default_path))
            except ValueError as e:
                logger.warning("Ignoring config file %s: %s", default_path, e)

    if path is not None:
        config = Config.merge_configs(config, Config.from_file(path))

    env_overrides: dict[str, Any] = {}
    if file := os.environ.get("BIBADD_FILE"):
        env_overrides["file"] = file
    if interact := os.environ.get("BIBADD_INTERACT"):
        env_overrides["interact"] = interact.lower() in _TRUE_VALUES
    if timeout := os.environ.get("BIBADD_TIMEOUT"):
        try:
            env_overrides["http"] = {"timeout": float(timeout)}
        except ValueError:
            logger.warning("Ignoring invalid BIBADD_TIMEOUT value %r", timeout)

    return Config.merge_configs(config, env_overrides)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
