"""Liqo: cross-chain lending liquidation dashboard."""

__version__ = "0.1.0"
