from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from liqo.config.models import (
    ExportConfig,
    GlobalConfig,
    IndexerConfig,
    LeaderboardConfig,
    PollingConfig,
    TableConfig,
)


def test_defaults() -> None:
    config = GlobalConfig()
    assert config.indexer.endpoint is None
    assert config.indexer.include_usd is True
    assert config.polling.interval_ms == 5000
    assert config.polling.limit == 10
    assert config.table.page_size == 10
    assert config.export.default_limit == 1000
    assert config.export.max_limit == 10000
    assert config.leaderboard.default_limit == 50
    assert config.server.poll is True


@pytest.mark.parametrize(("raw", "expected"), [(0, 1), (250, 100), ("abc", 10), (None, 10), (25, 25)])
def test_polling_limit_is_clamped(raw, expected) -> None:
    assert PollingConfig(limit=raw).limit == expected


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(ValidationError):
        PollingConfig(interval_ms=0)
    with pytest.raises(ValidationError):
        IndexerConfig(timeout=0)
    with pytest.raises(ValidationError):
        TableConfig(page_size=7)
    with pytest.raises(ValidationError):
        TableConfig(sort_key="bogus")
    with pytest.raises(ValidationError):
        ExportConfig(max_limit=20000)
    with pytest.raises(ValidationError):
        ExportConfig(default_limit=500, max_limit=100)
    with pytest.raises(ValidationError):
        ExportConfig(product_name="  ")
    with pytest.raises(ValidationError):
        LeaderboardConfig(default_limit=200)


def test_capture_path_resolution(tmp_path: Path) -> None:
    assert ExportConfig(capture_path="").capture_path is None
    relative = ExportConfig(capture_path="data/captures.db")
    assert relative.resolved_capture_path(tmp_path) == (tmp_path / "data" / "captures.db").resolve()
    absolute = ExportConfig(capture_path=tmp_path / "abs.db")
    assert absolute.resolved_capture_path(Path("/elsewhere")) == tmp_path / "abs.db"


def test_table_sort_key_accepts_sortable_columns() -> None:
    assert TableConfig(sort_key="chainId").sort_key == "chainId"
    assert TableConfig(sort_key="debtAsset", descending=False).descending is False
