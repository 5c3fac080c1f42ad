"""Terminal rendering helpers."""

from .formatting import (
    format_address,
    format_time,
    format_time_compact,
    format_token,
    format_usd,
)
from .tables import (
    explorer_text,
    render_dashboard,
    render_facets,
    render_leaderboard,
    render_liquidations,
    render_stats,
)

__all__ = [
    "explorer_text",
    "format_address",
    "format_time",
    "format_time_compact",
    "format_token",
    "format_usd",
    "render_dashboard",
    "render_facets",
    "render_leaderboard",
    "render_liquidations",
    "render_stats",
]
