"""Fuse container: one-shot timed callbacks driven by explicit polling.

The container owns every armed fuse. Nothing happens in the background:
expiry is only noticed when the caller polls, and callbacks run synchronously
on the caller's thread from inside poll() or poll_all().

Storage is an insertion-ordered dict keyed by handle. Removing a fuse compacts
the ordering, so positions (see handle_at) shift while handles stay valid.
Handles are never reused and carry the identity of the issuing container, so
a stale or foreign handle fails with FuseNotFoundError instead of addressing
some other fuse.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Iterator
from dataclasses import replace
from numbers import Real
from typing import Any

from fusebox.clock import Clock, MonotonicClock
from fusebox.errors import (
    ContainerClosedError,
    FuseNotFoundError,
    InvalidArgumentError,
    ReentrantCallError,
)
from fusebox.types import Fuse, FuseCallback, FuseHandle, FuseState

logger = logging.getLogger(__name__)

# Container identities stamped on every handle they issue
_owners = itertools.count(1)


def _validate_duration(duration: Any) -> float:
    if isinstance(duration, bool) or not isinstance(duration, Real):
        raise InvalidArgumentError(
            f"duration must be a number of seconds, got {type(duration).__name__}"
        )
    seconds = float(duration)
    if not math.isfinite(seconds):
        raise InvalidArgumentError(f"duration must be finite, got {duration!r}")
    if seconds < 0:
        raise InvalidArgumentError(f"duration must be non-negative, got {duration!r}")
    return seconds


class FuseContainer:
    """A collection of armed fuses.

    Example:
        container = FuseContainer()
        container.add("Five (5) second delay", 5, print)
        while container.count:
            container.poll_all()
        container.close()

    Callbacks must not mutate the container they are firing from. Doing so
    raises ReentrantCallError; read-only observation (count, get, ``in``)
    is allowed and sees the firing fuse still present.
    """

    def __init__(self, clock: Clock | None = None):
        self._clock: Clock = clock or MonotonicClock()
        self._fuses: dict[FuseHandle, Fuse] = {}
        self._owner = next(_owners)
        self._serials = itertools.count(1)
        self._firing: Fuse | None = None
        self._closed = False

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def count(self) -> int:
        """Number of live fuses."""
        return len(self._fuses)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def firing(self) -> bool:
        """True while a callback is executing."""
        return self._firing is not None

    def __len__(self) -> int:
        return len(self._fuses)

    def __contains__(self, handle: object) -> bool:
        return handle in self._fuses

    def __iter__(self) -> Iterator[FuseHandle]:
        # Snapshot so callers may remove while iterating
        return iter(list(self._fuses))

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"count={len(self._fuses)}"
        return f"<FuseContainer {state}>"

    def __enter__(self) -> FuseContainer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _check_open(self, operation: str) -> None:
        if self._closed:
            raise ContainerClosedError(f"cannot {operation}: container is closed")

    def _check_mutable(self, operation: str) -> None:
        self._check_open(operation)
        if self._firing is not None:
            raise ReentrantCallError(
                f"cannot {operation} from inside the callback of fuse "
                f"{self._firing.id}"
            )

    def _lookup(self, handle: FuseHandle) -> Fuse:
        if isinstance(handle, FuseHandle) and handle.owner != self._owner:
            raise FuseNotFoundError(
                f"handle {handle} belongs to another container", handle=handle
            )
        try:
            return self._fuses[handle]
        except (KeyError, TypeError):
            raise FuseNotFoundError(
                f"no live fuse with handle {handle}", handle=handle
            ) from None

    def add(self, payload: Any, duration: float, callback: FuseCallback) -> FuseHandle:
        """Arm a new fuse.

        Args:
            payload: Opaque value handed to ``callback`` on expiry. Never
                inspected by the container.
            duration: Seconds to wait before the fuse may fire.
            callback: Called once with ``payload`` when the fuse expires.

        Returns:
            Handle identifying the new fuse.

        Raises:
            InvalidArgumentError: If payload or callback is missing, or the
                duration is negative or not a finite number.
        """
        self._check_mutable("add")
        if payload is None:
            raise InvalidArgumentError("payload is required")
        if callback is None:
            raise InvalidArgumentError("callback is required")
        if not callable(callback):
            raise InvalidArgumentError(
                f"callback must be callable, got {type(callback).__name__}"
            )
        seconds = _validate_duration(duration)

        handle = FuseHandle(next(self._serials), owner=self._owner)
        self._fuses[handle] = Fuse(
            handle=handle,
            payload=payload,
            duration=seconds,
            callback=callback,
            armed_at=self._clock.now(),
        )
        logger.debug(
            "fuse_added",
            extra={
                "fuse.id": str(handle),
                "fuse.duration": seconds,
                "container.count": len(self._fuses),
            },
        )
        return handle

    def remove(self, handle: FuseHandle) -> None:
        """Disarm a fuse without invoking its callback.

        Raises:
            FuseNotFoundError: If the handle does not refer to a live fuse.
        """
        self._check_mutable("remove")
        fuse = self._lookup(handle)
        del self._fuses[handle]
        fuse.state = FuseState.DISARMED
        logger.debug(
            "fuse_removed",
            extra={"fuse.id": fuse.id, "container.count": len(self._fuses)},
        )

    def poll(self, handle: FuseHandle) -> bool:
        """Check one fuse, firing and removing it if it has expired.

        Returns:
            True if the fuse fired, False if it is still armed.

        Raises:
            FuseNotFoundError: If the handle does not refer to a live fuse.

        An exception raised by the callback propagates to the caller; the
        fuse has fired regardless and is removed first.
        """
        self._check_mutable("poll")
        fuse = self._lookup(handle)
        if not fuse.is_expired(self._clock.now()):
            return False
        try:
            self._fire(fuse)
        finally:
            self._fuses.pop(handle, None)
        return True

    def poll_all(self) -> int:
        """Fire every fuse that has expired.

        Expiry is judged against a single clock reading taken when the scan
        starts. Expired fuses fire in insertion order and are then removed
        together, so every fuse is evaluated exactly once per call.

        A callback that raises is logged and the scan continues.

        Returns:
            Number of fuses fired.
        """
        self._check_mutable("poll_all")
        now = self._clock.now()
        expired = [fuse for fuse in self._fuses.values() if fuse.is_expired(now)]
        if not expired:
            return 0

        try:
            for fuse in expired:
                try:
                    self._fire(fuse)
                except Exception as e:
                    logger.error(
                        "fuse_callback_error",
                        extra={"fuse.id": fuse.id, "error.message": str(e)},
                    )
        finally:
            # Drop everything that reached a terminal state, even if a
            # BaseException cut the scan short
            self._fuses = {
                handle: fuse for handle, fuse in self._fuses.items() if fuse.is_armed
            }
        return len(expired)

    def _fire(self, fuse: Fuse) -> None:
        # Mark first: a fuse is fired once even if its callback raises
        fuse.state = FuseState.FIRED
        self._firing = fuse
        try:
            fuse.callback(fuse.payload)
        finally:
            self._firing = None
        logger.info(
            "fuse_fired",
            extra={
                "fuse.id": fuse.id,
                "fuse.duration": fuse.duration,
                "fuse.late_by": round(self._clock.now() - fuse.deadline, 3),
            },
        )

    def reset(self, handle: FuseHandle) -> None:
        """Restart a fuse's countdown from now.

        Raises:
            FuseNotFoundError: If the handle does not refer to a live fuse.
        """
        self._check_mutable("reset")
        fuse = self._lookup(handle)
        fuse.armed_at = self._clock.now()
        logger.debug("fuse_reset", extra={"fuse.id": fuse.id})

    def reset_all(self) -> None:
        """Restart every fuse's countdown from the same instant."""
        self._check_mutable("reset_all")
        now = self._clock.now()
        for fuse in self._fuses.values():
            fuse.armed_at = now
        logger.debug("fuses_reset", extra={"container.count": len(self._fuses)})

    def clear(self) -> None:
        """Disarm every fuse. No callback is invoked."""
        self._check_mutable("clear")
        cleared = len(self._fuses)
        for fuse in self._fuses.values():
            fuse.state = FuseState.DISARMED
        self._fuses = {}
        if cleared:
            logger.debug("fuses_cleared", extra={"fuse.count": cleared})

    def close(self) -> None:
        """Disarm every fuse and close the container.

        Closing twice is a no-op. Any other operation on a closed container
        raises ContainerClosedError.
        """
        if self._closed:
            return
        self.clear()
        self._closed = True
        logger.debug("container_closed")

    def get(self, handle: FuseHandle) -> Fuse:
        """Return a copy of a live fuse.

        Raises:
            FuseNotFoundError: If the handle does not refer to a live fuse.
        """
        self._check_open("get")
        return replace(self._lookup(handle))

    def handle_at(self, position: int) -> FuseHandle:
        """Return the handle of the fuse at ``position`` in insertion order.

        Positions shift down when an earlier fuse is removed or fires.

        Raises:
            FuseNotFoundError: If no fuse is at that position.
        """
        self._check_open("handle_at")
        if not 0 <= position < len(self._fuses):
            raise FuseNotFoundError(
                f"position {position} out of range (count={len(self._fuses)})"
            )
        return next(itertools.islice(self._fuses, position, None))

    def position_of(self, handle: FuseHandle) -> int:
        """Return the current position of a live fuse."""
        self._check_open("position_of")
        self._lookup(handle)
        return list(self._fuses).index(handle)

    def next_deadline(self) -> float | None:
        """Earliest deadline among live fuses, or None when empty."""
        self._check_open("next_deadline")
        if not self._fuses:
            return None
        return min(fuse.deadline for fuse in self._fuses.values())
