"""Engine components: indexer client → poller → data store → table view, plus export."""

from .client import (
    ForwardedResponse,
    IndexerClient,
    IndexerError,
    IndexerStatusError,
    IndexerTransportError,
    MalformedResponseError,
)
from .export_service import ExportError, ExportResult, ExportService, is_valid_email
from .poller import Poller, has_changed
from .records import LiquidationRecord, LiquidationStats, LiquidatorRow
from .store import DataStore
from .table import TableState, TableView, build_view

__all__ = [
    "DataStore",
    "ExportError",
    "ExportResult",
    "ExportService",
    "ForwardedResponse",
    "IndexerClient",
    "IndexerError",
    "IndexerStatusError",
    "IndexerTransportError",
    "LiquidationRecord",
    "LiquidationStats",
    "LiquidatorRow",
    "MalformedResponseError",
    "Poller",
    "TableState",
    "TableView",
    "build_view",
    "has_changed",
    "is_valid_email",
]
