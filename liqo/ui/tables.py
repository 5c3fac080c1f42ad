"""Rich renderables for the liquidation table, leaderboard and stats."""

from __future__ import annotations

from typing import Sequence

from rich import box
from rich.console import Group
from rich.table import Table
from rich.text import Text

from ..engine.networks import address_url, chain_name, chain_style, tx_url
from ..engine.records import LiquidationStats, LiquidatorRow
from ..engine.table import TableView
from .formatting import format_address, format_time, format_time_compact, format_token, format_usd

_SORT_HEADERS = {
    "timestamp": "Date",
    "chainId": "Chain",
    "protocol": "Protocol",
    "borrower": "Borrower",
    "liquidator": "Liquidator",
    "txHash": "Transaction",
    "collateralAsset": "Collateral",
    "debtAsset": "Debt",
}


def explorer_text(label: str, url: str) -> Text:
    """Cell text hyperlinked to a block explorer; plain when the chain is unknown."""

    if url == "#":
        return Text(label)
    return Text(label, style=f"link {url}")


def _header(column: str, view: TableView) -> str:
    label = _SORT_HEADERS[column]
    if view.state.sort_key == column:
        return f"{label} {'↓' if view.state.descending else '↑'}"
    return label


def render_liquidations(view: TableView, title: str = "Recent liquidations") -> Table:
    table = Table(
        title=f"{title} · showing {len(view.rows)} of {view.matching} (loaded {view.loaded})",
        box=box.SIMPLE_HEAD,
        caption=f"page {view.page.page_index + 1}/{view.page.page_count} · ?{view.state.to_query()}",
    )
    table.add_column(_header("timestamp", view), style="dim", no_wrap=True)
    table.add_column(_header("chainId", view), no_wrap=True)
    table.add_column(_header("protocol", view), style="magenta")
    table.add_column(_header("borrower", view), style="cyan", no_wrap=True)
    table.add_column(_header("liquidator", view), style="cyan", no_wrap=True)
    table.add_column(_header("txHash", view), no_wrap=True)
    table.add_column(_header("collateralAsset", view))
    table.add_column(_header("debtAsset", view))
    if not view.rows:
        table.add_row("No data", *[""] * 7)
        return table
    for record in view.rows:
        collateral = (
            f"{format_token(record.collateral_asset)} ({format_usd(record.seized_assets_usd)})"
            if record.collateral_asset
            else "-"
        )
        debt = (
            f"{format_token(record.debt_asset)} ({format_usd(record.repaid_assets_usd)})"
            if record.debt_asset
            else "-"
        )
        table.add_row(
            format_time_compact(record.timestamp),
            Text(chain_name(record.chain_id), style=chain_style(record.chain_id)),
            record.protocol,
            explorer_text(format_address(record.borrower, 3), address_url(record.chain_id, record.borrower)),
            explorer_text(format_address(record.liquidator, 3), address_url(record.chain_id, record.liquidator)),
            explorer_text(format_address(record.tx_hash, 3), tx_url(record.chain_id, record.tx_hash)),
            collateral,
            debt,
        )
    return table


def render_facets(view: TableView) -> Table:
    table = Table(box=box.MINIMAL, show_header=True, pad_edge=False)
    table.add_column("Protocol", style="magenta")
    table.add_column("#", justify="right")
    table.add_column("Chain")
    table.add_column("#", justify="right")
    protocols = list(view.facets.protocols.items())
    chains = list(view.facets.chains.items())
    for index in range(max(len(protocols), len(chains))):
        protocol, protocol_count = protocols[index] if index < len(protocols) else ("", "")
        chain, chain_count = chains[index] if index < len(chains) else (None, "")
        marker = "*" if protocol and protocol in view.state.protocols else ""
        chain_marker = "*" if chain is not None and chain in view.state.chains else ""
        table.add_row(
            f"{protocol}{marker}",
            str(protocol_count),
            f"{chain_name(chain)}{chain_marker}" if chain is not None else "",
            str(chain_count),
        )
    return table


def render_dashboard(view: TableView) -> Group:
    return Group(render_liquidations(view), render_facets(view))


def render_leaderboard(rows: Sequence[LiquidatorRow]) -> Table:
    protocols = sorted({name for row in rows for name in row.per_protocol})
    table = Table(title="Liquidation leaderboard", box=box.SIMPLE_HEAD)
    table.add_column("#", justify="right")
    table.add_column("Liquidator", style="cyan", no_wrap=True)
    table.add_column("Chain")
    table.add_column("Total", justify="right", style="bold")
    for name in protocols:
        table.add_column(name.capitalize(), justify="right")
    table.add_column("First", style="dim")
    table.add_column("Last", style="dim")
    if not rows:
        table.add_row("", "No leaderboard data.", *[""] * (len(protocols) + 4))
        return table
    for rank, row in enumerate(rows, start=1):
        table.add_row(
            str(rank),
            format_address(row.liquidator, 4),
            chain_name(row.chain_id) if row.chain_id else "-",
            str(row.total),
            *[str(row.per_protocol.get(name, 0)) for name in protocols],
            format_time(row.first_timestamp) if row.first_timestamp else "-",
            format_time(row.last_timestamp) if row.last_timestamp else "-",
        )
    return table


def render_stats(stats: LiquidationStats | None) -> Table:
    table = Table(title="Liquidation stats", box=box.SIMPLE_HEAD, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    if stats is None:
        table.add_row("Total", "-")
        return table
    table.add_row("Total", str(stats.total))
    for name, count in sorted(stats.per_protocol.items()):
        table.add_row(name.capitalize(), str(count))
    return table


__all__ = [
    "explorer_text",
    "render_dashboard",
    "render_facets",
    "render_leaderboard",
    "render_liquidations",
    "render_stats",
]
