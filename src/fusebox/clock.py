"""Time sources for fuse containers.

The container never reads the time itself; it asks a Clock. MonotonicClock is
the default, WallClock follows the system clock, and ManualClock drives tests
and simulations deterministically.
"""

from __future__ import annotations

import logging
import time
from typing import Literal, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

ClockName = Literal["monotonic", "wall"]


@runtime_checkable
class Clock(Protocol):
    """Source of the current time in seconds."""

    def now(self) -> float: ...

    def sleep(self, seconds: float) -> None: ...


class MonotonicClock:
    """Clock backed by time.monotonic; unaffected by wall-clock changes."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class WallClock:
    """Clock backed by time.time."""

    def now(self) -> float:
        return time.time()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class ManualClock:
    """Clock that only moves when told to.

    Example:
        clock = ManualClock()
        container = FuseContainer(clock=clock)
        container.add("hello", 5, print)
        clock.advance(5)
        container.poll_all()  # prints "hello"
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        """Move time forward and return the new reading."""
        if seconds < 0:
            raise ValueError("cannot advance a clock backwards")
        self._now += seconds
        return self._now

    def set(self, now: float) -> None:
        if now < self._now:
            raise ValueError(f"cannot move clock back from {self._now} to {now}")
        self._now = float(now)

    def sleep(self, seconds: float) -> None:
        # Sleeping is virtual: time passes instantly
        if seconds > 0:
            self._now += seconds


_CLOCKS: dict[str, type[MonotonicClock] | type[WallClock]] = {
    "monotonic": MonotonicClock,
    "wall": WallClock,
}


def get_clock(name: str = "monotonic") -> Clock:
    """Create a clock by its configuration name.

    Raises:
        ValueError: If the name is not a known clock.
    """
    try:
        clock_cls = _CLOCKS[name]
    except KeyError:
        raise ValueError(
            f"Unknown clock: {name!r} (expected one of: {', '.join(_CLOCKS)})"
        ) from None
    logger.debug("clock_selected", extra={"clock.name": name})
    return clock_cls()
