from __future__ import annotations

import pytest

from liqo.config import ExportConfig
from liqo.engine import ExportError, ExportService, IndexerStatusError, is_valid_email
from liqo.engine.exporter import BOM, EmailCaptureStore
from liqo.infra import SQLiteManager


class StubSource:
    def __init__(self, records=None, error: Exception | None = None) -> None:
        self.records = records or []
        self.error = error
        self.calls: list[int] = []

    def query_recent(self, limit: int):
        self.calls.append(limit)
        if self.error is not None:
            raise self.error
        return self.records[:limit]


class BrokenCaptureStore:
    def capture(self, email, limit_requested, when=None):  # noqa: ANN001
        raise OSError("disk full")


@pytest.mark.parametrize(
    ("email", "valid"),
    [
        ("a@b.co", True),
        ("first.last+tag@example.org", True),
        ("", False),
        (None, False),
        ("no-at-sign.com", False),
        ("a@b", False),
        ("a b@c.d", False),
        ("a@b.c ", False),
    ],
)
def test_is_valid_email(email, valid) -> None:
    assert is_valid_email(email) is valid


def test_invalid_email_is_rejected_before_fetch() -> None:
    source = StubSource()
    service = ExportService(source, ExportConfig())
    with pytest.raises(ExportError) as excinfo:
        service.export("not-an-email", "50")
    assert excinfo.value.status_code == 400
    assert excinfo.value.message == "Valid email is required"
    assert source.calls == []


def test_export_builds_csv_and_filename(make_record) -> None:
    source = StubSource([make_record(id="a"), make_record(id="b")])
    service = ExportService(source, ExportConfig())

    result = service.export("user@example.com", "2")

    assert source.calls == [2]
    assert result.filename == "liqo_recent_2.csv"
    assert result.limit == 2
    assert result.count == 2
    assert result.content.startswith(BOM + "timestamp,protocol,")
    assert result.encode().startswith(b"\xef\xbb\xbf")


def test_export_limit_is_clamped() -> None:
    source = StubSource()
    service = ExportService(source, ExportConfig())
    assert service.export("user@example.com", None).filename == "liqo_recent_1000.csv"
    assert service.export("user@example.com", "50000").limit == 10000
    assert service.export("user@example.com", "abc").limit == 1000
    assert source.calls == [1000, 10000, 1000]


def test_upstream_failure_maps_to_bad_gateway() -> None:
    service = ExportService(StubSource(error=IndexerStatusError(500)), ExportConfig())
    with pytest.raises(ExportError) as excinfo:
        service.export("user@example.com", 10)
    assert excinfo.value.status_code == 502
    assert excinfo.value.message == "Upstream request failed"


def test_email_gate_can_be_disabled() -> None:
    source = StubSource()
    service = ExportService(source, ExportConfig(require_email=False))
    result = service.export(None, 5)
    assert result.count == 0
    assert source.calls == [5]


def test_valid_email_is_captured(tmp_path) -> None:
    manager = SQLiteManager()
    store = EmailCaptureStore(manager, tmp_path / "captures.db")
    service = ExportService(StubSource(), ExportConfig(), capture_store=store)

    service.export("user@example.com", "25")

    captures = store.recent()
    assert [(c.email, c.limit_requested) for c in captures] == [("user@example.com", 25)]
    manager.close_all()


def test_capture_failure_does_not_block_export() -> None:
    source = StubSource()
    service = ExportService(source, ExportConfig(), capture_store=BrokenCaptureStore())
    result = service.export("user@example.com", 3)
    assert result.limit == 3
    assert source.calls == [3]


def test_save_writes_file(tmp_path, make_record) -> None:
    service = ExportService(StubSource([make_record()]), ExportConfig(product_name="acme"))
    result = service.export("user@example.com", 1)
    path = service.save(result, tmp_path / "exports")
    assert path.name == "acme_recent_1.csv"
    assert path.read_bytes() == result.encode()
