"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from fusebox.config.models import ConfigError, FuseboxConfig
from fusebox.config.paths import get_config_path

LOG_LEVEL_ENV_VAR = "FUSEBOX_LOG_LEVEL"
POLL_INTERVAL_ENV_VAR = "FUSEBOX_POLL_INTERVAL"


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("config.toml"),  # Current directory
        get_config_path(),  # ~/.fusebox/config.toml (or FUSEBOX_HOME)
        Path("/etc/fusebox/config.toml"),  # System-wide
    ]


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Override config values from environment variables where set."""
    if level := os.environ.get(LOG_LEVEL_ENV_VAR):
        section = config.setdefault("logging", {})
        if not isinstance(section, dict):
            raise ConfigError("[logging] must be a table")
        section["level"] = level.strip().upper()

    if interval := os.environ.get(POLL_INTERVAL_ENV_VAR):
        try:
            config["poll_interval"] = float(interval)
        except ValueError:
            raise ConfigError(
                f"{POLL_INTERVAL_ENV_VAR} must be a number, got {interval!r}"
            ) from None

    return config


def load_config(path: Path | None = None) -> FuseboxConfig:
    """Load configuration from TOML file.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Validated FuseboxConfig instance.

    Raises:
        FileNotFoundError: If no config file is found.
        ConfigError: If an environment override is malformed.
        pydantic.ValidationError: If the config values are invalid.
    """
    config_path: Path | None = None

    default_paths = _get_default_config_paths()

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in default_paths:
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    if config_path is None:
        raise FileNotFoundError(
            f"No config file found. Searched: {', '.join(str(p) for p in default_paths)}"
        )

    with config_path.open("rb") as f:
        raw_config = tomllib.load(f)

    raw_config = _apply_env_overrides(raw_config)

    return FuseboxConfig.model_validate(raw_config)


def get_default_config() -> FuseboxConfig:
    """Get the built-in configuration, with environment overrides applied."""
    return FuseboxConfig.model_validate(_apply_env_overrides({}))


def load_config_or_default(path: Path | None = None) -> FuseboxConfig:
    """Load an explicit or discovered config file, else the defaults.

    A missing explicit ``path`` is still an error.
    """
    if path is not None:
        return load_config(path)
    try:
        return load_config()
    except FileNotFoundError:
        return get_default_config()
