"""
Copy Service: the one object that owns the live copy snapshot.

The service is built once when the API (or a CLI command) starts and closed
on shutdown. It wires the store, the query engine, and the refresh
orchestrator around an injected :class:`RemoteSource`, so tests can swap the
source for a fake.

Reads go through :meth:`CopyService.ensure_loaded`: when nothing has been
installed yet and ``lazy_load`` is on, the first read triggers a refresh.
"""

from __future__ import annotations

from datetime import datetime

from copyhub.sources import RemoteSource, build_source

from .contracts.copy_record import CopyRecord
from .errors import RemoteFetchFailure
from .query import CopyListing, QueryEngine
from .refresh import RefreshOrchestrator
from .settings import Settings, get_logger
from .store import CopySnapshot, CopyStore

logger = get_logger("copyhub.service")


class CopyService:
    """Facade over store, queries, and refresh with an explicit lifecycle.

    Parameters
    ----------
    source:
        Remote source used for every refresh.
    lazy_load:
        Refresh on the first read if the store is still empty.
    """

    def __init__(self, source: RemoteSource, *, lazy_load: bool = True) -> None:
        self.source = source
        self.lazy_load = lazy_load
        self.store = CopyStore()
        self.queries = QueryEngine(self.store)
        self.refresher = RefreshOrchestrator(source, self.store)
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings) -> CopyService:
        """Build a service whose source is chosen by ``settings.source``."""
        return cls(build_source(settings), lazy_load=settings.lazy_load)

    # ------------------------------- Lifecycle ------------------------------

    def start(self, *, refresh_on_startup: bool = False) -> None:
        """Optionally warm the cache. A failed warm-up leaves the store empty."""
        if not refresh_on_startup:
            return
        try:
            self.refresh()
        except RemoteFetchFailure as exc:
            logger.warning("Startup refresh failed, will load lazily: %s", exc)

    def close(self) -> None:
        """Mark the service closed; the snapshot goes away with the process."""
        self._closed = True
        logger.info("Copy service closed at revision %d", self.store.snapshot().revision)

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------- Reads ----------------------------------

    def ensure_loaded(self) -> None:
        """Run the lazy first fetch when needed.

        Concurrent first reads may each fetch; the last install wins.
        """
        if self.lazy_load and not self.store.is_populated:
            logger.info("Store empty; performing lazy first fetch")
            self.refresh()

    def list_since(self, since: str | datetime | None = None) -> CopyListing:
        self.ensure_loaded()
        return self.queries.list_since(since)

    def find_by_key(self, key: str) -> CopyRecord:
        self.ensure_loaded()
        return self.queries.find_by_key(key)

    def snapshot(self) -> CopySnapshot:
        return self.store.snapshot()

    # ------------------------------- Writes ---------------------------------

    def refresh(self) -> tuple[CopyRecord, ...]:
        return self.refresher.refresh()


__all__ = ["CopyService"]
