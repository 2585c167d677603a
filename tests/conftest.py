"""Shared test fixtures and factories."""

from pathlib import Path
from typing import Any

import pytest

from fusebox.clock import ManualClock
from fusebox.config.paths import ENV_VAR, get_fusebox_home
from fusebox.container import FuseContainer


class Recorder:
    """Callback that remembers every payload it was called with."""

    def __init__(self) -> None:
        self.calls: list[Any] = []

    def __call__(self, payload: Any) -> None:
        self.calls.append(payload)

    @property
    def count(self) -> int:
        return len(self.calls)


# =============================================================================
# Fuse Fixtures
# =============================================================================


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock starting at t=1000."""
    return ManualClock(start=1000.0)


@pytest.fixture
def container(clock: ManualClock):
    """Empty container on the manual clock, closed after the test."""
    fuses = FuseContainer(clock=clock)
    yield fuses
    fuses.close()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def fusebox_home(tmp_path: Path, monkeypatch) -> Path:
    """Point FUSEBOX_HOME at a temporary directory."""
    home = (tmp_path / "fusebox-home").resolve()
    monkeypatch.setenv(ENV_VAR, str(home))
    monkeypatch.delenv("FUSEBOX_LOG_LEVEL", raising=False)
    monkeypatch.delenv("FUSEBOX_POLL_INTERVAL", raising=False)
    get_fusebox_home.cache_clear()
    yield home
    get_fusebox_home.cache_clear()


@pytest.fixture
def config_toml_content() -> str:
    """Valid TOML config content."""
    return """
clock = "wall"
poll_interval = 0.25
heartbeat_interval = 10

[logging]
level = "DEBUG"

[demo]
time_scale = 0.5

[[demo.fuses]]
message = "Two (2) second delay"
seconds = 2

[[demo.fuses]]
message = "Zero (0) second delay"
seconds = 0
"""


@pytest.fixture
def config_file(tmp_path: Path, config_toml_content: str) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(config_toml_content)
    return config_path


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})


@pytest.fixture
def restore_root_logger():
    """Undo configure_logging() changes to the root logger."""
    import logging

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
