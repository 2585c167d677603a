"""Fusebox: one-shot timed callbacks driven by explicit polling.

Public API:
- FuseContainer: Owns armed fuses; add/remove/poll/poll_all/reset/clear/close
- FuseDriver: Polling loop that runs a container until it is empty

Types:
- Fuse, FuseHandle, FuseState, FuseCallback
- Clock, MonotonicClock, WallClock, ManualClock

Errors:
- FuseError and its subclasses InvalidArgumentError, FuseNotFoundError,
  ReentrantCallError, ContainerClosedError
"""

from fusebox.clock import Clock, ManualClock, MonotonicClock, WallClock, get_clock
from fusebox.container import FuseContainer
from fusebox.driver import DriverStats, FuseDriver
from fusebox.errors import (
    ContainerClosedError,
    FuseError,
    FuseNotFoundError,
    InvalidArgumentError,
    ReentrantCallError,
)
from fusebox.types import Fuse, FuseCallback, FuseHandle, FuseState

__all__ = [
    "Clock",
    "ContainerClosedError",
    "DriverStats",
    "Fuse",
    "FuseCallback",
    "FuseContainer",
    "FuseDriver",
    "FuseError",
    "FuseHandle",
    "FuseNotFoundError",
    "FuseState",
    "InvalidArgumentError",
    "ManualClock",
    "MonotonicClock",
    "ReentrantCallError",
    "WallClock",
    "get_clock",
]
