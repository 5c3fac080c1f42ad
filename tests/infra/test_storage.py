from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from liqo.engine.exporter import EmailCaptureStore
from liqo.infra import SQLiteManager


def test_manager_reuses_connection_and_creates_schema(tmp_path: Path) -> None:
    manager = SQLiteManager()
    path = tmp_path / "nested" / "captures.db"
    conn = manager.connect(path)
    assert manager.connect(path) is conn
    tables = {row["name"] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert "email_captures" in tables
    manager.close_all()


def test_capture_store_records_newest_first(tmp_path: Path) -> None:
    manager = SQLiteManager()
    store = EmailCaptureStore(manager, tmp_path / "captures.db")
    store.capture("first@example.com", 100, when=datetime(2024, 1, 1, tzinfo=timezone.utc))
    store.capture("second@example.com", 10000)

    captures = store.recent()
    assert [c.email for c in captures] == ["second@example.com", "first@example.com"]
    assert captures[1].limit_requested == 100
    assert captures[1].captured_at.startswith("2024-01-01T00:00:00")
    assert len(store.recent(limit=1)) == 1
    manager.close_all()
