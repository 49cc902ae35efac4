"""Read-only queries over the Copy Store.

Listing returns a small tagged type instead of a bare list:

- ``Records(records)``: the request matched (or no filter was given);
- ``Empty(message)``: a ``since`` filter matched nothing.

``Empty`` is a successful outcome, not an error. Keeping it as its own
variant means the HTTP layer never has to guess from a list's length.

Example
-------
>>> listing = engine.list_since("2023-07-05T10:30:00Z")
>>> listing.is_empty()
False
>>> listing.to_payload()
[{'id': 'rec2', ...}]
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .contracts.copy_record import CopyRecord, parse_timestamp
from .errors import InvalidArgument, NotFound
from .store import CopyStore

NO_RECORDS_MESSAGE = "We don't have records after the specified time"


class CopyListing:
    """Sum type for listing results: :class:`Records` or :class:`Empty`."""

    def is_empty(self) -> bool:
        """Return ``True`` if this is the :class:`Empty` sentinel."""
        return isinstance(self, Empty)

    def to_payload(self) -> list[dict[str, Any]] | dict[str, str]:
        """Render the JSON body: a list of records or the message object."""
        if isinstance(self, Records):
            return [record.to_raw() for record in self.records]
        if isinstance(self, Empty):
            return {"message": self.message}
        raise TypeError(f"Unknown listing variant: {type(self).__name__}")


@dataclass(frozen=True)
class Records(CopyListing):
    """Matching records in snapshot order."""

    records: tuple[CopyRecord, ...]


@dataclass(frozen=True)
class Empty(CopyListing):
    """A ``since`` filter left nothing to return."""

    message: str = NO_RECORDS_MESSAGE


def parse_since(value: str | datetime) -> datetime:
    """Parse a ``since`` argument, raising :class:`InvalidArgument` when malformed."""
    try:
        return parse_timestamp(value)
    except ValueError as exc:
        raise InvalidArgument(f"Invalid 'since' timestamp: {value!r}") from exc


class QueryEngine:
    """Answers listing and lookup queries without mutating the store."""

    __slots__ = ("_store",)

    def __init__(self, store: CopyStore) -> None:
        self._store = store

    def list_since(self, since: str | datetime | None = None) -> CopyListing:
        """
        List records, optionally only those created strictly after ``since``.

        Parameters
        ----------
        since:
            ``None`` returns the whole snapshot as-is (possibly empty).
            Otherwise an ISO-8601 string or ``datetime``; the comparison is
            strict, so a record created exactly at ``since`` is excluded.

        Returns
        -------
        CopyListing
            ``Records`` with the matches, or ``Empty`` if a filter matched nothing.

        Raises
        ------
        InvalidArgument
            If ``since`` cannot be parsed.
        """
        if since is None:
            return Records(self._store.get_all())

        threshold = parse_since(since)
        matches = tuple(r for r in self._store.get_all() if r.created_at > threshold)
        if not matches:
            return Empty()
        return Records(matches)

    def find_by_key(self, key: str) -> CopyRecord:
        """Return the first record (snapshot order) whose key equals ``key``.

        Raises
        ------
        NotFound
            If no record carries ``key``.
        """
        for record in self._store.get_all():
            if record.key == key:
                return record
        raise NotFound(key)


__all__ = [
    "NO_RECORDS_MESSAGE",
    "CopyListing",
    "Empty",
    "QueryEngine",
    "Records",
    "parse_since",
]
