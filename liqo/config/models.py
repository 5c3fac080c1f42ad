"""Pydantic models used across the Liqo configuration flow."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from ..limits import (
    EXPORT_DEFAULT_LIMIT,
    EXPORT_MAX_LIMIT,
    LEADERBOARD_DEFAULT_LIMIT,
    LEADERBOARD_MAX_LIMIT,
    LISTING_DEFAULT_LIMIT,
    LISTING_MAX_LIMIT,
    PAGE_SIZE_OPTIONS,
    clamp_limit,
)

DEFAULT_INDEXER_URL = "http://localhost:8080/v1/graphql"


class IndexerConfig(BaseModel):
    """Where and how to reach the upstream GraphQL indexer."""

    endpoint: str | None = Field(
        default=None,
        description="Indexer URL; environment variables take precedence when set.",
    )
    timeout: float = 15.0
    include_usd: bool = Field(
        default=True,
        description="Request repaidAssetsUSD/seizedAssetsUSD (disable for older indexer schemas).",
    )

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be > 0")
        return value


class PollingConfig(BaseModel):
    """Interval polling of the recent-liquidations query."""

    interval_ms: int = 5000
    limit: int = LISTING_DEFAULT_LIMIT

    @field_validator("interval_ms")
    @classmethod
    def _positive_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("interval_ms must be > 0")
        return value

    @field_validator("limit", mode="before")
    @classmethod
    def _clamp_limit(cls, value: Any) -> int:
        return clamp_limit(value, default=LISTING_DEFAULT_LIMIT, upper=LISTING_MAX_LIMIT)


class TableConfig(BaseModel):
    """Initial table presentation."""

    page_size: int = 10
    sort_key: str = "timestamp"
    descending: bool = True

    @field_validator("page_size")
    @classmethod
    def _known_page_size(cls, value: int) -> int:
        if value not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"page_size must be one of {PAGE_SIZE_OPTIONS}")
        return value

    @field_validator("sort_key")
    @classmethod
    def _known_sort_key(cls, value: str) -> str:
        from ..engine.table import SORTABLE_COLUMNS

        if value not in SORTABLE_COLUMNS:
            raise ValueError(f"sort_key must be one of {sorted(SORTABLE_COLUMNS)}")
        return value


class ExportConfig(BaseModel):
    """CSV export behaviour and optional email gate."""

    require_email: bool = True
    default_limit: int = EXPORT_DEFAULT_LIMIT
    max_limit: int = EXPORT_MAX_LIMIT
    product_name: str = "liqo"
    capture_path: Path | None = None

    @field_validator("capture_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path | None:
        if value in (None, ""):
            return None
        return Path(value)

    @model_validator(mode="after")
    def _validate_limits(self) -> "ExportConfig":
        if not 1 <= self.max_limit <= EXPORT_MAX_LIMIT:
            raise ValueError(f"max_limit must be within [1, {EXPORT_MAX_LIMIT}]")
        if not 1 <= self.default_limit <= self.max_limit:
            raise ValueError("default_limit must be within [1, max_limit]")
        if not self.product_name.strip():
            raise ValueError("product_name cannot be empty")
        return self

    def resolved_capture_path(self, base_dir: Path) -> Path | None:
        """Return capture store path relative to project root."""

        if self.capture_path is None:
            return None
        if not self.capture_path.is_absolute():
            return (base_dir / self.capture_path).resolve()
        return self.capture_path


class LeaderboardConfig(BaseModel):
    default_limit: int = LEADERBOARD_DEFAULT_LIMIT
    max_limit: int = LEADERBOARD_MAX_LIMIT

    @model_validator(mode="after")
    def _validate_limits(self) -> "LeaderboardConfig":
        if not 1 <= self.default_limit <= self.max_limit:
            raise ValueError("default_limit must be within [1, max_limit]")
        return self


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8000
    poll: bool = True


class GlobalConfig(BaseModel):
    """Top-level settings shared by the CLI and the HTTP service."""

    indexer: IndexerConfig = Field(default_factory=IndexerConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    table: TableConfig = Field(default_factory=TableConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    leaderboard: LeaderboardConfig = Field(default_factory=LeaderboardConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    outputs_dir: Path = Field(default=Path("data/outputs"))

    @field_validator("outputs_dir", mode="before")
    @classmethod
    def _coerce_dir(cls, value: Any) -> Path:
        return Path(value)


__all__ = [
    "DEFAULT_INDEXER_URL",
    "ExportConfig",
    "GlobalConfig",
    "IndexerConfig",
    "LeaderboardConfig",
    "PollingConfig",
    "ServerConfig",
    "TableConfig",
]
