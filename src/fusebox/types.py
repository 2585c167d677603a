"""Fuse types.

Public types:
- FuseHandle: Stable identity of a fuse within its container
- Fuse: One armed, one-shot timed callback
- FuseState: Lifecycle state of a fuse
- FuseCallback: Callback signature invoked on expiry
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

# Callback receives the payload the fuse was armed with; return value is ignored
FuseCallback = Callable[[Any], Any]


class FuseState(StrEnum):
    """Allowed fuse states. FIRED and DISARMED are terminal."""

    ARMED = "armed"
    FIRED = "fired"
    DISARMED = "disarmed"


@dataclass(frozen=True, order=True)
class FuseHandle:
    """Identity of a fuse.

    ``owner`` identifies the container that issued the handle and ``serial``
    is never reused within it, so a handle outliving its fuse, or one taken
    from another container, can never address a different fuse.
    """

    serial: int
    owner: int = 0

    def __str__(self) -> str:
        return f"{self.serial:08x}"


@dataclass
class Fuse:
    """A single armed fuse."""

    handle: FuseHandle
    payload: Any
    duration: float
    callback: FuseCallback = field(repr=False)
    armed_at: float
    state: FuseState = FuseState.ARMED

    @property
    def id(self) -> str:
        return str(self.handle)

    @property
    def deadline(self) -> float:
        return self.armed_at + self.duration

    @property
    def is_armed(self) -> bool:
        return self.state == FuseState.ARMED

    def is_expired(self, now: float) -> bool:
        """Check whether the fuse's duration has elapsed at ``now``."""
        return now >= self.deadline
