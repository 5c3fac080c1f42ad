"""APScheduler wrapper exposing higher level helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..logging_conf import configure_logging


class APSchedulerAdapter:
    """Manage interval jobs on a background scheduler."""

    def __init__(self) -> None:
        self.scheduler = BackgroundScheduler()
        self.logger = configure_logging().bind(component="scheduler")
        self.started = False

    def start(self) -> None:
        if not self.started:
            self.scheduler.start()
            self.started = True
            self.logger.info("apscheduler_started")

    def shutdown(self) -> None:
        if self.started:
            self.scheduler.shutdown(wait=False)
            self.started = False
            self.logger.info("apscheduler_stopped")

    def schedule_interval(
        self,
        job_id: str,
        callback: Callable[[], Any],
        seconds: float,
        run_immediately: bool = True,
    ) -> None:
        """Run ``callback`` every ``seconds``; overlapping runs are skipped, not queued."""

        if seconds <= 0:
            raise ValueError("Interval must be positive")
        job_kwargs: dict[str, Any] = {
            "trigger": IntervalTrigger(seconds=seconds),
            "id": job_id,
            "replace_existing": True,
            "max_instances": 1,
            "coalesce": True,
        }
        if run_immediately:
            job_kwargs["next_run_time"] = datetime.now(timezone.utc)
        self.scheduler.add_job(callback, **job_kwargs)
        self.logger.info("job_scheduled", job_id=job_id, seconds=seconds, immediate=run_immediately)

    def remove_job(self, job_id: str) -> None:
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            self.logger.warning("job_remove_failed", job_id=job_id)


__all__ = ["APSchedulerAdapter"]
