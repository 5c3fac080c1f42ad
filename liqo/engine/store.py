"""In-memory holder of the current liquidation snapshot."""

from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from typing import Iterable

from .records import LiquidationRecord


class DataStore:
    """Single mutable reference to the current ordered list of records.

    Readers get an immutable tuple; ``replace`` swaps the whole snapshot.
    """

    def __init__(self, initial: Iterable[LiquidationRecord] = ()) -> None:
        self._lock = Lock()
        self._records: tuple[LiquidationRecord, ...] = tuple(initial)
        self._version = 0
        self._updated_at: datetime | None = None

    def snapshot(self) -> tuple[LiquidationRecord, ...]:
        with self._lock:
            return self._records

    def replace(self, records: Iterable[LiquidationRecord]) -> int:
        """Swap in a new snapshot and return the new version."""

        new_records = tuple(records)
        with self._lock:
            self._records = new_records
            self._version += 1
            self._updated_at = datetime.now(timezone.utc)
            return self._version

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    @property
    def updated_at(self) -> datetime | None:
        with self._lock:
            return self._updated_at

    def __len__(self) -> int:
        return len(self.snapshot())


__all__ = ["DataStore"]
