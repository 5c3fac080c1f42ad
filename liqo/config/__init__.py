"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository, resolve_endpoint
from .models import (
    DEFAULT_INDEXER_URL,
    ExportConfig,
    GlobalConfig,
    IndexerConfig,
    LeaderboardConfig,
    PollingConfig,
    ServerConfig,
    TableConfig,
)

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "DEFAULT_INDEXER_URL",
    "ExportConfig",
    "GlobalConfig",
    "IndexerConfig",
    "LeaderboardConfig",
    "PollingConfig",
    "ServerConfig",
    "TableConfig",
    "resolve_endpoint",
]
