"""
In-memory Copy Store holding one immutable snapshot.

The store keeps a single reference to a frozen :class:`CopySnapshot`. Readers
grab that reference and work on it; :meth:`CopyStore.replace` builds the next
snapshot first and then swaps the reference. A reader therefore sees either
the whole old set or the whole new set, never a mix.

Design Notes
------------
- **Immutability**: records are held in a tuple inside a frozen dataclass.
- **Short critical section**: the lock only guards the reference swap and the
  revision bump. Building the tuple happens outside of it and the remote fetch
  never touches it.
- **Two states**: Empty (revision 0) and Populated (revision >= 1). Only
  :meth:`replace` moves between them, and nothing moves back to Empty.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from .contracts.copy_record import CopyRecord


@dataclass(frozen=True, slots=True)
class CopySnapshot:
    """
    Immutable set of copy records valid at one point in time.

    Attributes
    ----------
    records : tuple[CopyRecord, ...]
        Records in the order the remote source delivered them.
    revision : int
        0 for the initial empty snapshot, then +1 per install.
    installed_at : str | None
        ISO-8601 UTC time of the install; ``None`` before the first one.
    """

    records: tuple[CopyRecord, ...] = ()
    revision: int = 0
    installed_at: str | None = None

    def __len__(self) -> int:
        return len(self.records)


class CopyStore:
    """Holder of the live :class:`CopySnapshot` with atomic replacement."""

    __slots__ = ("_snapshot", "_lock")

    def __init__(self) -> None:
        self._snapshot: CopySnapshot = CopySnapshot()
        self._lock = threading.Lock()

    def snapshot(self) -> CopySnapshot:
        """Return the live snapshot (records plus revision metadata)."""
        with self._lock:
            return self._snapshot

    def get_all(self) -> tuple[CopyRecord, ...]:
        """Return every record of the live snapshot in source order."""
        return self.snapshot().records

    @property
    def is_populated(self) -> bool:
        """True once any snapshot has been installed, even an empty one."""
        return self.snapshot().revision > 0

    def replace(self, records: Iterable[CopyRecord]) -> CopySnapshot:
        """
        Install ``records`` as the new snapshot, discarding the old one.

        Parameters
        ----------
        records : Iterable[CopyRecord]
            The complete new record set. It is materialized before the lock
            is taken, so a failing iterator leaves the old snapshot live.

        Returns
        -------
        CopySnapshot
            The snapshot that was installed.
        """
        frozen = tuple(records)
        installed_at = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
        with self._lock:
            snap = CopySnapshot(
                records=frozen,
                revision=self._snapshot.revision + 1,
                installed_at=installed_at,
            )
            self._snapshot = snap
        return snap


__all__ = ["CopySnapshot", "CopyStore"]
