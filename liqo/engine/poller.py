"""Interval polling of recent liquidations into the data store."""

from __future__ import annotations

from threading import Lock
from typing import Protocol, Sequence

import structlog

from ..limits import LISTING_DEFAULT_LIMIT, LISTING_MAX_LIMIT, clamp_limit
from .client import IndexerError
from .records import LiquidationRecord
from .store import DataStore

POLL_JOB_ID = "poller::recent-liquidations"
DEFAULT_INTERVAL_MS = 5000


class RecentSource(Protocol):
    def query_recent(self, limit: int) -> list[LiquidationRecord]: ...


class IntervalScheduler(Protocol):
    def schedule_interval(self, job_id: str, callback, seconds: float, run_immediately: bool = True) -> None: ...

    def remove_job(self, job_id: str) -> None: ...

    def start(self) -> None: ...


def has_changed(current: Sequence[LiquidationRecord], latest: Sequence[LiquidationRecord]) -> bool:
    """Shallow change check: different length or different head id.

    Reorderings and interior edits that keep both are not detected.
    """

    if len(latest) != len(current):
        return True
    if not latest:
        return False
    return latest[0].id != current[0].id


class Poller:
    """Fetch on a fixed interval with at most one request in flight."""

    def __init__(
        self,
        client: RecentSource,
        store: DataStore,
        limit: int = LISTING_DEFAULT_LIMIT,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        scheduler: IntervalScheduler | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")
        self.client = client
        self.store = store
        self.limit = clamp_limit(limit, default=LISTING_DEFAULT_LIMIT, upper=LISTING_MAX_LIMIT)
        self.interval_ms = interval_ms
        self.scheduler = scheduler
        self.logger = logger or structlog.get_logger("liqo.poller").bind(component="poller")
        # Non-blocking acquire doubles as the Idle/Fetching flag
        self._in_flight = Lock()
        self._aborted = False
        self._running = False
        # Bumped on every start/stop; a tick whose generation changed is stale
        self._generation = 0

    @property
    def fetching(self) -> bool:
        return self._in_flight.locked()

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Schedule the interval job; the first tick fires immediately."""

        if self._running:
            return
        if self.scheduler is None:
            raise RuntimeError("Poller.start requires a scheduler")
        self._aborted = False
        self._generation += 1
        self.scheduler.schedule_interval(
            POLL_JOB_ID, self.tick, self.interval_ms / 1000.0, run_immediately=True
        )
        self.scheduler.start()
        self._running = True
        self.logger.info("poller_started", interval_ms=self.interval_ms, limit=self.limit)

    def stop(self) -> None:
        """Cancel the timer; a fetch still in flight is discarded when it returns."""

        self._aborted = True
        self._generation += 1
        if self._running and self.scheduler is not None:
            self.scheduler.remove_job(POLL_JOB_ID)
        if self._running:
            self.logger.info("poller_stopped")
        self._running = False

    def tick(self) -> bool:
        """Run one poll cycle. Returns True when the snapshot was replaced."""

        if not self._in_flight.acquire(blocking=False):
            self.logger.debug("poll_skipped", reason="in_flight")
            return False
        generation = self._generation
        try:
            try:
                latest = self.client.query_recent(self.limit)
            except IndexerError as exc:
                self.logger.warning("poll_failed", error=str(exc))
                return False
            if self._aborted or generation != self._generation:
                self.logger.debug("poll_discarded", reason="stopped")
                return False
            if not has_changed(self.store.snapshot(), latest):
                return False
            version = self.store.replace(latest)
            self.logger.info("snapshot_replaced", version=version, size=len(latest))
            return True
        finally:
            self._in_flight.release()


__all__ = ["DEFAULT_INTERVAL_MS", "POLL_JOB_ID", "Poller", "has_changed"]
