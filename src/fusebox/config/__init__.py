"""Configuration loading and models."""

from fusebox.config.loader import (
    get_default_config,
    load_config,
    load_config_or_default,
)
from fusebox.config.models import (
    ConfigError,
    DemoConfig,
    DemoFuse,
    FuseboxConfig,
    LoggingConfig,
)

__all__ = [
    "ConfigError",
    "DemoConfig",
    "DemoFuse",
    "FuseboxConfig",
    "LoggingConfig",
    "get_default_config",
    "load_config",
    "load_config_or_default",
]
