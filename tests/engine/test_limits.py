from __future__ import annotations

import pytest

from liqo.limits import (
    EXPORT_DEFAULT_LIMIT,
    EXPORT_MAX_LIMIT,
    LEADERBOARD_DEFAULT_LIMIT,
    LEADERBOARD_MAX_LIMIT,
    clamp_limit,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, 1000),
        ("", 1000),
        ("   ", 1000),
        ("abc", 1000),
        ("250", 250),
        (" 42 ", 42),
        (7, 7),
        ("0", 1),
        ("-5", 1),
        ("50000", 10000),
        ("12.7", 12),
        (float("inf"), 1000),
        (float("nan"), 1000),
        (True, 1000),
    ],
)
def test_clamp_export_limit(raw, expected) -> None:
    assert clamp_limit(raw, default=EXPORT_DEFAULT_LIMIT, upper=EXPORT_MAX_LIMIT) == expected


def test_clamp_leaderboard_limit() -> None:
    assert clamp_limit(None, default=LEADERBOARD_DEFAULT_LIMIT, upper=LEADERBOARD_MAX_LIMIT) == 50
    assert clamp_limit("500", default=LEADERBOARD_DEFAULT_LIMIT, upper=LEADERBOARD_MAX_LIMIT) == 100


def test_default_is_clamped_too() -> None:
    assert clamp_limit(None, default=500, upper=100) == 100
