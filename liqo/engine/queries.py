"""GraphQL documents sent to the upstream indexer."""

from __future__ import annotations

_RECENT_FIELDS = (
    "id",
    "chainId",
    "timestamp",
    "protocol",
    "borrower",
    "liquidator",
    "txHash",
    "collateralAsset",
    "debtAsset",
    "repaidAssets",
    "seizedAssets",
)
_USD_FIELDS = ("repaidAssetsUSD", "seizedAssetsUSD")


def recent_liquidations_query(include_usd: bool = True) -> str:
    fields = _RECENT_FIELDS + (_USD_FIELDS if include_usd else ())
    body = "\n".join(f"      {name}" for name in fields)
    return (
        "query RecentLiquidations($limit: Int!) {\n"
        "  GeneralizedLiquidation(limit: $limit, order_by: { timestamp: desc }) {\n"
        f"{body}\n"
        "  }\n"
        "}\n"
    )


STATS_QUERY = """
query Stats {
  LiquidationStats(limit: 1, order_by: { id: desc }) {
    id
    chainId
    aaveCount
    eulerCount
    morphoCount
    totalCount
  }
}
"""

LEADERBOARD_QUERY = """
query Leaderboard($limit: Int!) {
  Liquidator(order_by: { totalLiquidations: desc }, limit: $limit) {
    id
    liquidator
    chainId
    aaveLiquidations
    eulerLiquidations
    morphoLiquidations
    totalLiquidations
    firstLiquidationTimestamp
    lastLiquidationTimestamp
  }
}
"""

__all__ = ["LEADERBOARD_QUERY", "STATS_QUERY", "recent_liquidations_query"]
