"""The capability every remote copy source provides."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from copyhub.core.contracts.copy_record import RawRecord


@runtime_checkable
class RemoteSource(Protocol):
    """Something that can return the full current set of raw copy records.

    Implementations own their transport concerns (auth, paging, timeouts).
    They signal failure by raising; :class:`~copyhub.core.errors.RemoteFetchFailure`
    is preferred, anything else is wrapped by the refresh orchestrator.
    """

    def fetch_all(self) -> Sequence[RawRecord]:
        """Return every raw record, in the source's order."""
        ...


__all__ = ["RemoteSource"]
