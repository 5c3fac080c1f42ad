"""Dashboard wiring: initial snapshot, poller and table views over the store."""

from __future__ import annotations

from typing import Iterable

from .config import GlobalConfig
from .engine import DataStore, IndexerClient, Poller, TableState, TableView, build_view
from .engine.records import LiquidationRecord
from .limits import LISTING_MAX_LIMIT, clamp_limit
from .logging_conf import configure_logging


class Dashboard:
    """Own the data store and its poller for one listing size."""

    def __init__(
        self,
        config: GlobalConfig,
        client: IndexerClient,
        scheduler=None,
        limit: int | None = None,
        interval_ms: int | None = None,
        initial: Iterable[LiquidationRecord] = (),
    ) -> None:
        self.config = config
        self.client = client
        self.limit = clamp_limit(limit, default=config.polling.limit, upper=LISTING_MAX_LIMIT)
        self.store = DataStore(initial)
        self.logger = configure_logging().bind(component="dashboard")
        self.poller = Poller(
            client,
            self.store,
            limit=self.limit,
            interval_ms=interval_ms or config.polling.interval_ms,
            scheduler=scheduler,
            logger=self.logger.bind(component="poller"),
        )
        self._bootstrapped = bool(self.store.snapshot())

    def bootstrap(self) -> int:
        """Load the first snapshot so the first render is not empty."""

        records = self.client.fetch_recent(self.limit)
        self.store.replace(records)
        self._bootstrapped = True
        self.logger.info("dashboard_bootstrapped", size=len(records), limit=self.limit)
        return len(records)

    def ensure_bootstrapped(self) -> None:
        if not self._bootstrapped:
            self.bootstrap()

    def start(self) -> None:
        self.ensure_bootstrapped()
        self.poller.start()

    def stop(self) -> None:
        self.poller.stop()

    def default_state(self) -> TableState:
        table = self.config.table
        return TableState(
            sort_key=table.sort_key,
            descending=table.descending,
            page_size=table.page_size,
        )

    def view(self, state: TableState | None = None) -> TableView:
        return build_view(self.store.snapshot(), state or self.default_state())


__all__ = ["Dashboard"]
