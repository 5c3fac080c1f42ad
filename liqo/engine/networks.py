"""Known chains and their block explorers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NetworkInfo:
    chain_id: int
    name: str
    network_name: str
    explorer_url: str
    style: str = "white"


NETWORKS: dict[int, NetworkInfo] = {
    1: NetworkInfo(1, "Ethereum", "ethereum", "https://etherscan.io", "blue"),
    10: NetworkInfo(10, "Optimism", "optimism", "https://optimistic.etherscan.io", "red"),
    56: NetworkInfo(56, "BSC", "bsc", "https://bscscan.com", "yellow"),
    100: NetworkInfo(100, "Gnosis", "gnosis", "https://gnosisscan.io", "green"),
    137: NetworkInfo(137, "Polygon", "polygon", "https://polygonscan.com", "magenta"),
    8453: NetworkInfo(8453, "Base", "base", "https://basescan.org", "blue"),
    42161: NetworkInfo(42161, "Arbitrum", "arbitrum", "https://arbiscan.io", "cyan"),
    43114: NetworkInfo(43114, "Avalanche", "avalanche", "https://snowtrace.io", "red"),
    534352: NetworkInfo(534352, "Scroll", "scroll", "https://scrollscan.com", "dark_orange"),
}

DEFAULT_STYLE = "white"


def chain_name(chain_id: int) -> str:
    info = NETWORKS.get(chain_id)
    return info.name if info else f"Chain {chain_id}"


def chain_style(chain_id: int) -> str:
    info = NETWORKS.get(chain_id)
    return info.style if info else DEFAULT_STYLE


def address_url(chain_id: int, address: str) -> str:
    info = NETWORKS.get(chain_id)
    return f"{info.explorer_url}/address/{address}" if info else "#"


def tx_url(chain_id: int, tx_hash: str) -> str:
    info = NETWORKS.get(chain_id)
    return f"{info.explorer_url}/tx/{tx_hash}" if info else "#"


__all__ = ["NETWORKS", "NetworkInfo", "address_url", "chain_name", "chain_style", "tx_url"]
