"""Shared fixtures: the canonical two-record snapshot and a fake remote source."""

from __future__ import annotations

from collections.abc import Generator, Sequence
from typing import Any

import pytest

from copyhub.core.settings import load_settings

RawRecords = list[dict[str, Any]]


class FakeSource:
    """In-memory `RemoteSource`: returns queued batches, or raises `error`.

    After the last batch has been served it keeps returning that batch.
    """

    def __init__(self, *batches: RawRecords, error: Exception | None = None) -> None:
        self.batches: list[RawRecords] = list(batches) or [[]]
        self.error = error
        self.calls = 0

    def fetch_all(self) -> Sequence[dict[str, Any]]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.batches[min(self.calls, len(self.batches)) - 1]


@pytest.fixture  # type: ignore[misc]
def copy_data() -> RawRecords:
    """Two records an hour apart, as the remote table returns them."""
    return [
        {
            "id": "rec1",
            "createdTime": "2023-07-05T10:00:00.000Z",
            "fields": {"Key": "intro", "Copy": "Welcome to our app!"},
        },
        {
            "id": "rec2",
            "createdTime": "2023-07-05T11:00:00.000Z",
            "fields": {"Key": "greeting", "Copy": "Hello, {name}!"},
        },
    ]


@pytest.fixture  # type: ignore[misc]
def airtable_records() -> RawRecords:
    """A different snapshot, used as the result of a refresh."""
    return [
        {
            "id": "record1",
            "createdTime": "2023-07-05T10:30:00Z",
            "fields": {"Key": "greeting", "Copy": "Hello, {name}!"},
        },
        {
            "id": "record2",
            "createdTime": "2023-07-05T11:00:00Z",
            "fields": {"Key": "bye", "Copy": "Goodbye"},
        },
    ]


@pytest.fixture(autouse=True)  # type: ignore[misc]
def _reset_settings_cache() -> Generator[None, None, None]:
    """Drop any settings a test built from a patched environment."""
    yield
    load_settings.cache_clear()
