"""On-demand CSV export of the most recent liquidations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import structlog

from ..config import ExportConfig
from ..limits import clamp_limit
from .client import IndexerError
from .exporter import EmailCaptureStore, render_csv
from .records import LiquidationRecord

_EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

INVALID_EMAIL_MESSAGE = "Valid email is required"
UPSTREAM_FAILED_MESSAGE = "Upstream request failed"


def is_valid_email(email: str | None) -> bool:
    """Permissive check: local part, ``@``, and a domain containing a dot."""

    if not email:
        return False
    return _EMAIL_PATTERN.fullmatch(email) is not None


class ExportError(Exception):
    """Export rejected or failed; carries the HTTP status to report."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class RecentSource(Protocol):
    def query_recent(self, limit: int) -> list[LiquidationRecord]: ...


@dataclass(slots=True)
class ExportResult:
    filename: str
    content: str
    limit: int
    count: int

    def encode(self) -> bytes:
        return self.content.encode("utf-8")


class ExportService:
    """Fetch a large batch, render it as CSV and hand it to the caller."""

    def __init__(
        self,
        client: RecentSource,
        config: ExportConfig,
        capture_store: EmailCaptureStore | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.client = client
        self.config = config
        self.capture_store = capture_store
        self.logger = logger or structlog.get_logger("liqo.export").bind(component="export")

    def effective_limit(self, raw_limit: Any) -> int:
        return clamp_limit(raw_limit, default=self.config.default_limit, upper=self.config.max_limit)

    def filename_for(self, limit: int) -> str:
        return f"{self.config.product_name}_recent_{limit}.csv"

    def export(self, email: str | None, raw_limit: Any = None) -> ExportResult:
        limit = self.effective_limit(raw_limit)
        valid_email = is_valid_email(email)
        if self.config.require_email and not valid_email:
            self.logger.info("export_rejected", reason="invalid_email")
            raise ExportError(400, INVALID_EMAIL_MESSAGE)
        if valid_email:
            self._capture(email, limit)  # type: ignore[arg-type]

        try:
            records = self.client.query_recent(limit)
        except IndexerError as exc:
            self.logger.warning("export_upstream_failed", limit=limit, error=str(exc))
            raise ExportError(502, UPSTREAM_FAILED_MESSAGE) from exc

        content = render_csv(records)
        self.logger.info("export_completed", limit=limit, rows=len(records))
        return ExportResult(
            filename=self.filename_for(limit),
            content=content,
            limit=limit,
            count=len(records),
        )

    def save(self, result: ExportResult, directory: Path) -> Path:
        """Write the CSV to ``directory`` under its suggested filename."""

        directory.mkdir(parents=True, exist_ok=True)
        path = directory / result.filename
        path.write_bytes(result.encode())
        self.logger.info("export_saved", path=str(path), rows=result.count)
        return path

    def _capture(self, email: str, limit: int) -> None:
        if self.capture_store is None:
            return
        try:
            self.capture_store.capture(email, limit)
        except Exception as exc:  # noqa: BLE001
            self.logger.error("email_capture_failed", error=str(exc))


__all__ = [
    "ExportError",
    "ExportResult",
    "ExportService",
    "INVALID_EMAIL_MESSAGE",
    "UPSTREAM_FAILED_MESSAGE",
    "is_valid_email",
]
