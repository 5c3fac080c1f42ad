"""Request-size bounds and coercion of untrusted limit values."""

from __future__ import annotations

import math
from typing import Any

MIN_LIMIT = 1
EXPORT_DEFAULT_LIMIT = 1000
EXPORT_MAX_LIMIT = 10000
LISTING_DEFAULT_LIMIT = 10
LISTING_MAX_LIMIT = 100
LEADERBOARD_DEFAULT_LIMIT = 50
LEADERBOARD_MAX_LIMIT = 100

PAGE_SIZE_OPTIONS: tuple[int, ...] = (5, 10, 25, 50, 100)


def clamp_limit(
    raw: Any,
    default: int,
    upper: int = EXPORT_MAX_LIMIT,
    lower: int = MIN_LIMIT,
) -> int:
    """Coerce ``raw`` into an integer inside ``[lower, upper]``.

    Missing, blank, non-numeric and non-finite values fall back to ``default``
    (itself clamped). Fractional values are floored.
    """

    value: float | None
    if raw is None or isinstance(raw, bool):
        value = None
    elif isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        try:
            value = float(text) if text else None
        except ValueError:
            value = None
    if value is None or not math.isfinite(value):
        value = float(default)
    return max(lower, min(upper, int(math.floor(value))))


__all__ = [
    "EXPORT_DEFAULT_LIMIT",
    "EXPORT_MAX_LIMIT",
    "LEADERBOARD_DEFAULT_LIMIT",
    "LEADERBOARD_MAX_LIMIT",
    "LISTING_DEFAULT_LIMIT",
    "LISTING_MAX_LIMIT",
    "MIN_LIMIT",
    "PAGE_SIZE_OPTIONS",
    "clamp_limit",
]
