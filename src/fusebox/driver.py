"""Fuse driver: the polling loop that keeps a container ticking.

The driver owns the loop; all fuse bookkeeping is delegated to the
FuseContainer. It runs on the caller's thread and sleeps through the
container's clock, so a ManualClock makes a run instantaneous.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fusebox.container import FuseContainer

logger = logging.getLogger(__name__)


@dataclass
class DriverStats:
    """Summary of a driver run."""

    polls: int = 0
    fired: int = 0
    started_at: float = 0.0
    finished_at: float = 0.0

    @property
    def elapsed(self) -> float:
        return self.finished_at - self.started_at


class FuseDriver:
    """Polls a container until it is empty.

    Example:
        container = FuseContainer()
        container.add("done", 2, print)
        stats = FuseDriver(container, poll_interval=0.1).run()
        container.close()
    """

    def __init__(
        self,
        container: FuseContainer,
        poll_interval: float = 0.05,
        heartbeat_interval: int = 100,
    ):
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")
        if heartbeat_interval < 1:
            raise ValueError(
                f"heartbeat_interval must be at least 1, got {heartbeat_interval}"
            )
        self._container = container
        self._poll_interval = poll_interval
        self._heartbeat_interval = heartbeat_interval
        self._running = False
        self._stop_requested = False

    @property
    def container(self) -> FuseContainer:
        return self._container

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Ask a running loop to exit after the current poll."""
        self._stop_requested = True

    def run(
        self, *, until_empty: bool = True, max_polls: int | None = None
    ) -> DriverStats:
        """Poll the container repeatedly.

        Args:
            until_empty: Return once the container holds no fuses.
            max_polls: Return after this many polls regardless.

        Returns:
            Poll and fire counts for this run.
        """
        if self._running:
            raise RuntimeError("driver is already running")

        clock = self._container.clock
        stats = DriverStats(started_at=clock.now())
        self._running = True
        self._stop_requested = False
        logger.info(
            "fuse_driver_started",
            extra={
                "container.count": self._container.count,
                "poll.interval": self._poll_interval,
            },
        )
        try:
            while not self._should_stop(stats, until_empty, max_polls):
                stats.polls += 1
                if stats.polls % self._heartbeat_interval == 0:
                    logger.info(
                        "fuse_driver_heartbeat",
                        extra={
                            "poll.count": stats.polls,
                            "container.count": self._container.count,
                        },
                    )
                stats.fired += self._container.poll_all()

                if self._should_stop(stats, until_empty, max_polls):
                    break
                clock.sleep(self._sleep_interval())
        finally:
            self._running = False
            stats.finished_at = clock.now()

        logger.info(
            "fuse_driver_stopped",
            extra={
                "poll.count": stats.polls,
                "fuse.fired": stats.fired,
                "container.count": self._container.count,
            },
        )
        return stats

    def _should_stop(
        self, stats: DriverStats, until_empty: bool, max_polls: int | None
    ) -> bool:
        if self._stop_requested:
            return True
        if until_empty and not self._container.count:
            return True
        return max_polls is not None and stats.polls >= max_polls

    def _sleep_interval(self) -> float:
        # Wake no later than the next deadline
        deadline = self._container.next_deadline()
        if deadline is None:
            return self._poll_interval
        wait = deadline - self._container.clock.now()
        return min(self._poll_interval, max(wait, 0.0))
