"""Persist emails submitted through the export gate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock

from ...infra.storage import SQLiteManager


@dataclass(slots=True)
class EmailCapture:
    email: str
    limit_requested: int
    captured_at: str


class EmailCaptureStore:
    """Append-only log of (email, requested limit, timestamp)."""

    def __init__(self, manager: SQLiteManager, db_path: Path) -> None:
        self.manager = manager
        self.db_path = db_path
        self._lock = Lock()
        self._conn = self.manager.connect(db_path)

    def capture(self, email: str, limit_requested: int, when: datetime | None = None) -> None:
        captured_at = (when or datetime.now(timezone.utc)).isoformat()
        with self._lock:
            self._conn.execute(
                "INSERT INTO email_captures(email, limit_requested, captured_at) VALUES (?, ?, ?)",
                (email, int(limit_requested), captured_at),
            )
            self._conn.commit()

    def recent(self, limit: int = 20) -> list[EmailCapture]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT email, limit_requested, captured_at FROM email_captures ORDER BY id DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [
            EmailCapture(
                email=row["email"],
                limit_requested=row["limit_requested"],
                captured_at=row["captured_at"],
            )
            for row in rows
        ]


__all__ = ["EmailCapture", "EmailCaptureStore"]
