"""Liquidation record types and normalisation of upstream rows."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import structlog

logger = structlog.get_logger("liqo.records")


@dataclass(frozen=True, slots=True)
class LiquidationRecord:
    """One liquidation event as returned by the indexer."""

    id: str
    chain_id: int
    timestamp: str
    protocol: str
    borrower: str
    liquidator: str
    tx_hash: str
    collateral_asset: str | None = None
    debt_asset: str | None = None
    repaid_assets: str | None = None
    seized_assets: str | None = None
    repaid_assets_usd: float | None = None
    seized_assets_usd: float | None = None

    def to_wire(self) -> dict[str, Any]:
        """Return the record keyed by the upstream (camelCase) field names."""

        return {
            "id": self.id,
            "chainId": self.chain_id,
            "timestamp": self.timestamp,
            "protocol": self.protocol,
            "borrower": self.borrower,
            "liquidator": self.liquidator,
            "txHash": self.tx_hash,
            "collateralAsset": self.collateral_asset,
            "debtAsset": self.debt_asset,
            "repaidAssets": self.repaid_assets,
            "seizedAssets": self.seized_assets,
            "repaidAssetsUSD": self.repaid_assets_usd,
            "seizedAssetsUSD": self.seized_assets_usd,
        }


@dataclass(frozen=True, slots=True)
class LiquidationStats:
    """Aggregate counters published by the indexer."""

    id: str
    total: int
    per_protocol: dict[str, int] = field(default_factory=dict)
    chain_id: int | None = None


@dataclass(frozen=True, slots=True)
class LiquidatorRow:
    """One leaderboard entry, ranked upstream by total liquidations."""

    id: str
    liquidator: str
    total: int
    per_protocol: dict[str, int] = field(default_factory=dict)
    chain_id: int | None = None
    first_timestamp: str | None = None
    last_timestamp: str | None = None


def _address(value: Any, key: str) -> str:
    # Some indexer versions return {"borrower": {"borrower": "0x..."}} instead of a bare string
    if isinstance(value, Mapping):
        for candidate in (key, "address", "id"):
            inner = value.get(candidate)
            if isinstance(inner, str):
                return inner
        return ""
    if value is None:
        return ""
    return str(value)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text != "" else None


def parse_usd(value: Any) -> float | None:
    """Parse a USD valuation that may arrive as a number or numeric string."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _count(value: Any) -> int:
    parsed = _optional_int(value)
    return parsed if parsed is not None else 0


def normalize_record(row: Mapping[str, Any]) -> LiquidationRecord:
    """Map an upstream row (flat or nested address shape) to a record.

    Raises ``ValueError`` when the row has no id or no usable chain id.
    """

    record_id = row.get("id")
    if record_id in (None, ""):
        raise ValueError("record is missing id")
    chain_id = _optional_int(row.get("chainId"))
    if chain_id is None:
        raise ValueError(f"record {record_id} has invalid chainId {row.get('chainId')!r}")
    timestamp = row.get("timestamp")
    return LiquidationRecord(
        id=str(record_id),
        chain_id=chain_id,
        timestamp="" if timestamp is None else str(timestamp),
        protocol=str(row.get("protocol") or ""),
        borrower=_address(row.get("borrower"), "borrower"),
        liquidator=_address(row.get("liquidator"), "liquidator"),
        tx_hash=str(row.get("txHash") or ""),
        collateral_asset=_optional_text(row.get("collateralAsset")),
        debt_asset=_optional_text(row.get("debtAsset")),
        repaid_assets=_optional_text(row.get("repaidAssets")),
        seized_assets=_optional_text(row.get("seizedAssets")),
        repaid_assets_usd=parse_usd(row.get("repaidAssetsUSD")),
        seized_assets_usd=parse_usd(row.get("seizedAssetsUSD")),
    )


def normalize_records(rows: Iterable[Any]) -> list[LiquidationRecord]:
    """Normalise a batch, dropping rows that cannot become records."""

    records: list[LiquidationRecord] = []
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            logger.warning("record_dropped", index=index, reason="not an object")
            continue
        try:
            records.append(normalize_record(row))
        except ValueError as exc:
            logger.warning("record_dropped", index=index, reason=str(exc))
    return records


def _split_counts(row: Mapping[str, Any], suffix: str, total_key: str) -> dict[str, int]:
    counts: dict[str, int] = {}
    for key, value in row.items():
        if key == total_key or not key.endswith(suffix) or len(key) == len(suffix):
            continue
        counts[key[: -len(suffix)]] = _count(value)
    return counts


def normalize_stats(row: Mapping[str, Any]) -> LiquidationStats:
    return LiquidationStats(
        id=str(row.get("id") or ""),
        total=_count(row.get("totalCount")),
        per_protocol=_split_counts(row, "Count", "totalCount"),
        chain_id=_optional_int(row.get("chainId")),
    )


def normalize_liquidator(row: Mapping[str, Any]) -> LiquidatorRow:
    return LiquidatorRow(
        id=str(row.get("id") or ""),
        liquidator=_address(row.get("liquidator"), "liquidator"),
        total=_count(row.get("totalLiquidations")),
        per_protocol=_split_counts(row, "Liquidations", "totalLiquidations"),
        chain_id=_optional_int(row.get("chainId")),
        first_timestamp=_optional_text(row.get("firstLiquidationTimestamp")),
        last_timestamp=_optional_text(row.get("lastLiquidationTimestamp")),
    )


__all__ = [
    "LiquidationRecord",
    "LiquidationStats",
    "LiquidatorRow",
    "normalize_liquidator",
    "normalize_record",
    "normalize_records",
    "normalize_stats",
    "parse_usd",
]
