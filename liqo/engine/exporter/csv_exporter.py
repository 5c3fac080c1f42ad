"""Spreadsheet-friendly CSV rendering of liquidation records."""

from __future__ import annotations

import csv
import io
from typing import Any, Iterable, TextIO

from ..records import LiquidationRecord
from .base import BaseExporter

BOM = "\ufeff"

CSV_COLUMNS: tuple[str, ...] = (
    "timestamp",
    "protocol",
    "borrower",
    "liquidator",
    "txHash",
    "collateralAsset",
    "debtAsset",
    "repaidAssets",
    "repaidAssetsUSD",
    "seizedAssets",
    "seizedAssetsUSD",
    "chainId",
)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


class CsvExporter(BaseExporter):
    """Write records to a text stream as comma-separated rows.

    A byte-order mark and the header row are written before the first record
    (or on ``close`` when no record was exported). Fields containing a comma,
    quote or newline are quoted with inner quotes doubled.
    """

    def __init__(self, stream: TextIO, include_bom: bool = True) -> None:
        self._stream = stream
        self._include_bom = include_bom
        self._writer = csv.writer(stream, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
        self._header_written = False

    def _ensure_header(self) -> None:
        if self._header_written:
            return
        if self._include_bom:
            self._stream.write(BOM)
        self._writer.writerow(CSV_COLUMNS)
        self._header_written = True

    def export(self, record: LiquidationRecord) -> None:
        self._ensure_header()
        wire = record.to_wire()
        self._writer.writerow([_cell(wire[column]) for column in CSV_COLUMNS])

    def flush(self) -> None:
        self._ensure_header()
        self._stream.flush()

    def close(self) -> None:
        self.flush()


def render_csv(records: Iterable[LiquidationRecord], include_bom: bool = True) -> str:
    """Return the full CSV document for ``records``."""

    buffer = io.StringIO()
    exporter = CsvExporter(buffer, include_bom=include_bom)
    exporter.export_many(records)
    exporter.close()
    return buffer.getvalue()


__all__ = ["BOM", "CSV_COLUMNS", "CsvExporter", "render_csv"]
