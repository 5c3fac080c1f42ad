"""HTTP client for the upstream liquidation indexer."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from ..config import GlobalConfig
from ..limits import (
    EXPORT_DEFAULT_LIMIT,
    EXPORT_MAX_LIMIT,
    LEADERBOARD_DEFAULT_LIMIT,
    LEADERBOARD_MAX_LIMIT,
    clamp_limit,
)
from .queries import LEADERBOARD_QUERY, STATS_QUERY, recent_liquidations_query
from .records import (
    LiquidationRecord,
    LiquidationStats,
    LiquidatorRow,
    normalize_liquidator,
    normalize_records,
    normalize_stats,
)


# InvalidURL is not an HTTPError; a closed client raises RuntimeError
_TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, RuntimeError)


class IndexerError(RuntimeError):
    """Base class for failures talking to the indexer."""


class IndexerTransportError(IndexerError):
    """Network-level failure (DNS, connect, timeout)."""


class IndexerStatusError(IndexerError):
    """Indexer answered with a non-success status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Unexpected status {status_code}")
        self.status_code = status_code


class MalformedResponseError(IndexerError):
    """Response body did not have the expected shape."""


@dataclass(slots=True)
class ForwardedResponse:
    """Upstream answer relayed verbatim by the proxy route."""

    status_code: int
    text: str


class IndexerClient:
    """Send GraphQL queries to the indexer and normalise the results.

    The ``query_*`` methods raise :class:`IndexerError`; the ``fetch_*``
    methods never raise and return an empty result on any failure.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 15.0,
        include_usd: bool = True,
        transport: httpx.BaseTransport | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.include_usd = include_usd
        self.logger = logger or structlog.get_logger("liqo.client")
        self._client = httpx.Client(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        self._recent_query = recent_liquidations_query(include_usd)

    @classmethod
    def from_config(
        cls,
        config: GlobalConfig,
        endpoint: str,
        transport: httpx.BaseTransport | None = None,
    ) -> "IndexerClient":
        return cls(
            endpoint,
            timeout=config.indexer.timeout,
            include_usd=config.indexer.include_usd,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Strict queries
    # ------------------------------------------------------------------
    def query_recent(self, limit: int) -> list[LiquidationRecord]:
        """Return up to ``limit`` records, newest first as ordered upstream."""

        limit = clamp_limit(limit, default=EXPORT_DEFAULT_LIMIT, upper=EXPORT_MAX_LIMIT)
        data = self._execute(self._recent_query, {"limit": limit})
        rows = data.get("GeneralizedLiquidation")
        if rows is None:
            rows = []
        if not isinstance(rows, list):
            raise MalformedResponseError("GeneralizedLiquidation is not a list")
        return normalize_records(rows)[:limit]

    def query_stats(self) -> LiquidationStats | None:
        data = self._execute(STATS_QUERY, None)
        rows = data.get("LiquidationStats") or []
        if not isinstance(rows, list):
            raise MalformedResponseError("LiquidationStats is not a list")
        if not rows or not isinstance(rows[0], dict):
            return None
        return normalize_stats(rows[0])

    def query_leaderboard(self, limit: int) -> list[LiquidatorRow]:
        limit = clamp_limit(limit, default=LEADERBOARD_DEFAULT_LIMIT, upper=LEADERBOARD_MAX_LIMIT)
        data = self._execute(LEADERBOARD_QUERY, {"limit": limit})
        rows = data.get("Liquidator") or []
        if not isinstance(rows, list):
            raise MalformedResponseError("Liquidator is not a list")
        return [normalize_liquidator(row) for row in rows if isinstance(row, dict)]

    # ------------------------------------------------------------------
    # Lenient wrappers
    # ------------------------------------------------------------------
    def fetch_recent(self, limit: int) -> list[LiquidationRecord]:
        try:
            return self.query_recent(limit)
        except IndexerError as exc:
            self.logger.warning("fetch_recent_failed", endpoint=self.endpoint, error=str(exc))
            return []

    def fetch_stats(self) -> LiquidationStats | None:
        try:
            return self.query_stats()
        except IndexerError as exc:
            self.logger.warning("fetch_stats_failed", endpoint=self.endpoint, error=str(exc))
            return None

    def fetch_leaderboard(self, limit: int) -> list[LiquidatorRow]:
        try:
            return self.query_leaderboard(limit)
        except IndexerError as exc:
            self.logger.warning("fetch_leaderboard_failed", endpoint=self.endpoint, error=str(exc))
            return []

    # ------------------------------------------------------------------
    # Proxy passthrough
    # ------------------------------------------------------------------
    def forward(self, body: bytes | str) -> ForwardedResponse:
        """Relay an arbitrary GraphQL body and return the upstream answer verbatim."""

        try:
            payload = json.loads(body) if body else {}
        except ValueError:
            payload = {}
        try:
            response = self._client.post(self.endpoint, json=payload)
        except _TRANSPORT_ERRORS as exc:
            self.logger.warning("forward_failed", endpoint=self.endpoint, error=str(exc))
            raise IndexerTransportError(str(exc)) from exc
        return ForwardedResponse(status_code=response.status_code, text=response.text)

    # ------------------------------------------------------------------
    def _execute(self, query: str, variables: dict[str, Any] | None) -> dict[str, Any]:
        body: dict[str, Any] = {"query": query}
        if variables is not None:
            body["variables"] = variables
        try:
            response = self._client.post(self.endpoint, json=body)
        except _TRANSPORT_ERRORS as exc:
            raise IndexerTransportError(str(exc)) from exc
        if not response.is_success:
            raise IndexerStatusError(response.status_code)
        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponseError("response body is not JSON") from exc
        if not isinstance(payload, dict):
            raise MalformedResponseError("response body is not an object")
        data = payload.get("data")
        if not isinstance(data, dict):
            errors = payload.get("errors")
            raise MalformedResponseError(f"response has no data: {errors!r}")
        return data


__all__ = [
    "ForwardedResponse",
    "IndexerClient",
    "IndexerError",
    "IndexerStatusError",
    "IndexerTransportError",
    "MalformedResponseError",
]
