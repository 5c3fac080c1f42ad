"""Exporter Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ..records import LiquidationRecord


class BaseExporter(ABC):
    """Uniform contract for writers that serialise liquidation records."""

    @abstractmethod
    def export(self, record: LiquidationRecord) -> None:
        """Write a single record."""

    def export_many(self, records: Iterable[LiquidationRecord]) -> int:
        count = 0
        for record in records:
            self.export(record)
            count += 1
        return count

    @abstractmethod
    def flush(self) -> None:
        """Flush buffered data to destination."""

    @abstractmethod
    def close(self) -> None:
        """Release underlying resources."""


__all__ = ["BaseExporter"]
