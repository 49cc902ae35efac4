"""Refresh Orchestrator: resynchronize the Copy Store with the remote source.

A refresh is always a full replace:

1. fetch every raw record from the remote source (slow, may fail, no lock held);
2. validate all of them into :class:`CopyRecord` objects;
3. install them as the new snapshot;
4. hand back exactly what was installed.

Any failure in steps 1-2 raises :class:`RemoteFetchFailure` before the store
is touched, so the previous snapshot stays live.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .contracts.copy_record import CopyRecord
from .errors import RemoteFetchFailure
from .settings import get_logger
from .store import CopyStore

if TYPE_CHECKING:
    from copyhub.sources.base import RemoteSource

logger = get_logger("copyhub.refresh")


class RefreshOrchestrator:
    """Pulls a full snapshot from a :class:`RemoteSource` into a :class:`CopyStore`."""

    __slots__ = ("_source", "_store")

    def __init__(self, source: RemoteSource, store: CopyStore) -> None:
        self._source = source
        self._store = store

    def refresh(self) -> tuple[CopyRecord, ...]:
        """Fetch, validate, and install a new snapshot.

        Returns
        -------
        tuple[CopyRecord, ...]
            The records just installed, so callers can echo them without a
            second read that another refresh could interleave with.

        Raises
        ------
        RemoteFetchFailure
            If the source fails or returns a malformed record.
        """
        source_name = type(self._source).__name__
        try:
            raw_records = self._source.fetch_all()
        except RemoteFetchFailure:
            logger.warning("Refresh from %s failed; keeping previous snapshot", source_name)
            raise
        except Exception as exc:
            logger.warning("Refresh from %s failed: %s", source_name, exc)
            raise RemoteFetchFailure(f"{source_name} fetch failed: {exc}") from exc

        records: list[CopyRecord] = []
        for index, raw in enumerate(raw_records):
            try:
                records.append(CopyRecord.from_raw(raw))
            except ValueError as exc:
                logger.warning("Rejected snapshot from %s: record #%d malformed", source_name, index)
                raise RemoteFetchFailure(f"Malformed record at position {index}: {exc}") from exc

        snapshot = self._store.replace(records)
        logger.info(
            "Installed snapshot revision %d with %d records from %s",
            snapshot.revision,
            len(snapshot),
            source_name,
        )
        return snapshot.records


__all__ = ["RefreshOrchestrator"]
