"""Text formatting for addresses, timestamps, tokens and USD values."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any


def format_address(address: str | None, size: int = 6) -> str:
    if not address:
        return "-"
    return f"{address[: 2 + size]}…{address[-size:]}"


def _epoch(timestamp: Any) -> float | None:
    try:
        value = float(str(timestamp).strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def format_time(timestamp: str) -> str:
    """Local date-time for an epoch-seconds string; raw value when not numeric."""

    seconds = _epoch(timestamp)
    if seconds is None:
        return timestamp
    try:
        return datetime.fromtimestamp(seconds).strftime("%Y-%m-%d %H:%M:%S")
    except (OverflowError, OSError, ValueError):
        return timestamp


def format_time_compact(timestamp: str) -> str:
    seconds = _epoch(timestamp)
    if seconds is None:
        return timestamp
    try:
        return datetime.fromtimestamp(seconds).strftime("%m/%d %H:%M")
    except (OverflowError, OSError, ValueError):
        return timestamp


def format_token(token: str | None, max_length: int = 6) -> str:
    if not token:
        return "-"
    return token[:max_length] + "..." if len(token) > max_length else token


def format_usd(value: float | None, fraction_digits: int = 2) -> str:
    if value is None or not math.isfinite(value):
        return "$-"
    return f"${value:.{fraction_digits}f}"


__all__ = [
    "format_address",
    "format_time",
    "format_time_compact",
    "format_token",
    "format_usd",
]
