from __future__ import annotations

from datetime import datetime

import pytest
from rich.console import Console

from liqo.engine.networks import address_url, chain_name, tx_url
from liqo.engine.records import LiquidationStats, LiquidatorRow
from liqo.engine.table import TableState, build_view
from liqo.ui import (
    explorer_text,
    format_address,
    format_time,
    format_time_compact,
    format_token,
    format_usd,
    render_dashboard,
    render_leaderboard,
    render_liquidations,
    render_stats,
)


def _render(renderable) -> str:
    console = Console(width=200, record=True)
    console.print(renderable)
    return console.export_text()


def test_format_address() -> None:
    address = "0x1234567890abcdef1234567890abcdef12345678"
    assert format_address(address) == "0x123456…345678"
    assert format_address(address, 3) == "0x123…678"
    assert format_address(None) == "-"
    assert format_address("") == "-"


def test_format_time_falls_back_to_raw() -> None:
    expected = datetime.fromtimestamp(1700000000).strftime("%Y-%m-%d %H:%M:%S")
    assert format_time("1700000000") == expected
    assert format_time_compact("1700000000") == datetime.fromtimestamp(1700000000).strftime("%m/%d %H:%M")
    assert format_time("not-a-time") == "not-a-time"
    assert format_time_compact("") == ""


@pytest.mark.parametrize(
    ("token", "expected"),
    [("USDC", "USDC"), ("0x1234567890", "0x1234..."), (None, "-")],
)
def test_format_token(token, expected) -> None:
    assert format_token(token) == expected


def test_format_usd() -> None:
    assert format_usd(1234.5) == "$1234.50"
    assert format_usd(0.0) == "$0.00"
    assert format_usd(None) == "$-"
    assert format_usd(float("nan")) == "$-"


def test_network_lookup() -> None:
    assert chain_name(8453) == "Base"
    assert chain_name(999) == "Chain 999"
    assert tx_url(1, "0xabc") == "https://etherscan.io/tx/0xabc"
    assert address_url(42161, "0xdef") == "https://arbiscan.io/address/0xdef"
    assert tx_url(999, "0xabc") == "#"


def test_render_dashboard_shows_rows_and_query(make_record) -> None:
    records = [make_record(protocol="morpho", chain_id=534352), make_record(protocol="aave")]
    state = TableState(search="", protocols=frozenset({"morpho"}))
    text = _render(render_dashboard(build_view(records, state)))
    assert "showing 1 of 1 (loaded 2)" in text
    assert "Scroll" in text
    assert "protocol=morpho" in text
    assert "Date ↓" in text


def test_render_empty_dashboard() -> None:
    text = _render(render_dashboard(build_view([], TableState())))
    assert "No data" in text
    assert "page 1/1" in text


def test_render_leaderboard_and_stats() -> None:
    rows = [
        LiquidatorRow(
            id="1",
            liquidator="0x1234567890abcdef",
            total=7,
            per_protocol={"aave": 4, "morpho": 3},
            chain_id=1,
        )
    ]
    board = _render(render_leaderboard(rows))
    assert "Liquidation leaderboard" in board
    assert "0x1234…cdef" in board
    assert "Morpho" in board
    assert "No leaderboard data." in _render(render_leaderboard([]))

    stats = _render(render_stats(LiquidationStats(id="s", total=9, per_protocol={"euler": 9})))
    assert "Euler" in stats
    assert "9" in stats
    assert "Total" in _render(render_stats(None))


def test_liquidation_cells_link_to_explorer(make_record) -> None:
    linked = make_record(chain_id=1, borrower="0xb0b", tx_hash="0xfeed")
    unknown = make_record(chain_id=999, borrower="0xb0b", tx_hash="0xfeed")
    table = render_liquidations(build_view([linked, unknown], TableState(sort_key="chainId", descending=False)))

    borrower_cells = list(table.columns[3].cells)
    tx_cells = list(table.columns[5].cells)
    assert str(borrower_cells[0].style) == "link https://etherscan.io/address/0xb0b"
    assert str(tx_cells[0].style) == "link https://etherscan.io/tx/0xfeed"
    assert str(tx_cells[1].style) == ""
    assert tx_cells[1].plain == tx_cells[0].plain


def test_explorer_text_skips_unknown_chains() -> None:
    assert explorer_text("0xabc", "#").style == ""
    assert explorer_text("0xabc", tx_url(10, "0xabc")).style == "link https://optimistic.etherscan.io/tx/0xabc"
