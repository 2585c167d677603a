"""Centralized path management for Fusebox.

Fusebox keeps its config file and logs under a single base directory.
The base directory can be overridden with the FUSEBOX_HOME environment variable.

Default locations:
- Linux/macOS: ~/.fusebox
- Windows: %USERPROFILE%\\.fusebox
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "FUSEBOX_HOME"


@lru_cache(maxsize=1)
def get_fusebox_home() -> Path:
    """Get the base directory for all Fusebox data.

    Resolution order:
    1. FUSEBOX_HOME environment variable (if set)
    2. Platform default (~/.fusebox)
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()

    return Path.home() / ".fusebox"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_fusebox_home() / "config.toml"


def get_logs_path() -> Path:
    """Get the JSONL log directory."""
    return get_fusebox_home() / "logs"
