from __future__ import annotations

from datetime import datetime, timezone

import pytest
from apscheduler.jobstores.base import JobLookupError
from apscheduler.triggers.interval import IntervalTrigger

from liqo.scheduler import APSchedulerAdapter


class _FixedDatetime(datetime):
    @classmethod
    def now(cls, tz=None):  # noqa: ANN001
        return cls(2024, 1, 1, 10, 0, 0, tzinfo=tz)


class StubScheduler:
    def __init__(self) -> None:
        self.calls: list[dict] = []

    def add_job(self, callback, **kwargs):  # noqa: ANN001
        self.calls.append({"event": "add", "callback": callback, **kwargs})

    def get_jobs(self):
        return []

    def start(self):
        self.calls.append({"event": "started"})

    def shutdown(self, wait=False):  # noqa: ARG002
        self.calls.append({"event": "shutdown"})

    def remove_job(self, job_id):  # noqa: ANN001
        self.calls.append({"event": "remove", "id": job_id})
        raise JobLookupError(job_id)


def test_schedule_interval_uses_single_instance_job(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("liqo.scheduler.apsched_adapter.datetime", _FixedDatetime)
    adapter = APSchedulerAdapter()
    stub = StubScheduler()
    adapter.scheduler = stub  # type: ignore[assignment]

    def tick() -> None:
        return None

    adapter.schedule_interval("poller::test", tick, 5.0)
    call = stub.calls[0]
    assert call["id"] == "poller::test"
    assert call["callback"] is tick
    assert isinstance(call["trigger"], IntervalTrigger)
    assert call["trigger"].interval.total_seconds() == 5
    assert call["max_instances"] == 1
    assert call["coalesce"] is True
    assert call["replace_existing"] is True
    assert call["next_run_time"] == datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)

    adapter.schedule_interval("poller::later", tick, 1.0, run_immediately=False)
    assert "next_run_time" not in stub.calls[1]

    adapter.start()
    adapter.start()
    adapter.remove_job("poller::test")
    adapter.shutdown()
    events = [c["event"] for c in stub.calls]
    assert events == ["add", "add", "started", "remove", "shutdown"]


def test_schedule_interval_rejects_non_positive() -> None:
    adapter = APSchedulerAdapter()
    with pytest.raises(ValueError):
        adapter.schedule_interval("poller::bad", lambda: None, 0)
