"""Exporter SPI and implementations."""

from .base import BaseExporter
from .capture import EmailCapture, EmailCaptureStore
from .csv_exporter import BOM, CSV_COLUMNS, CsvExporter, render_csv

__all__ = [
    "BOM",
    "BaseExporter",
    "CSV_COLUMNS",
    "CsvExporter",
    "EmailCapture",
    "EmailCaptureStore",
    "render_csv",
]
