"""Configuration models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field

from fusebox.clock import ClockName

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = "INFO"
    rich: bool = False  # Colorful console output
    to_file: bool = False  # Also write JSONL files under $FUSEBOX_HOME/logs
    retention_days: int = Field(default=7, ge=1)


class DemoFuse(BaseModel):
    """A sample fuse armed by the demo command."""

    message: str
    seconds: float = Field(ge=0)


DEFAULT_DEMO_FUSES: list[tuple[str, float]] = [
    ("Ten (10) second delay", 10),
    ("Five (5) second delay", 5),
    ("One (1) second delay", 1),
    ("Twelve (12) second delay", 12),
    ("Six (6) second delay", 6),
    ("Eight (8) second delay", 8),
]


def _default_demo_fuses() -> list[DemoFuse]:
    return [DemoFuse(message=m, seconds=s) for m, s in DEFAULT_DEMO_FUSES]


class DemoConfig(BaseModel):
    """Configuration for the demo command."""

    fuses: list[DemoFuse] = Field(default_factory=_default_demo_fuses)
    # Multiplier applied to every demo duration (0.1 = ten times faster)
    time_scale: float = Field(default=1.0, gt=0)


class ConfigError(Exception):
    """Configuration error."""

    pass


class FuseboxConfig(BaseModel):
    """Root configuration model."""

    clock: ClockName = "monotonic"
    poll_interval: float = Field(default=0.05, gt=0)
    heartbeat_interval: int = Field(default=100, ge=1)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    demo: DemoConfig = Field(default_factory=DemoConfig)
