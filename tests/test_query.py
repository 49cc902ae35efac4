"""Unit tests for since-filtering, the empty-result sentinel, and key lookup."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from copyhub.core.contracts.copy_record import CopyRecord
from copyhub.core.errors import InvalidArgument, NotFound
from copyhub.core.query import NO_RECORDS_MESSAGE, Empty, QueryEngine, Records
from copyhub.core.store import CopyStore


@pytest.fixture  # type: ignore[misc]
def engine(copy_data: list[dict[str, Any]]) -> QueryEngine:
    store = CopyStore()
    store.replace(CopyRecord.from_raw(r) for r in copy_data)
    return QueryEngine(store)


def _ids(listing: Any) -> list[str]:
    assert isinstance(listing, Records)
    return [r.id for r in listing.records]


def test_no_since_returns_everything_as_is(engine: QueryEngine, copy_data: list[dict[str, Any]]) -> None:
    listing = engine.list_since()
    assert _ids(listing) == ["rec1", "rec2"]
    assert listing.to_payload() == copy_data


def test_no_since_on_empty_store_is_an_empty_list_not_the_sentinel() -> None:
    listing = QueryEngine(CopyStore()).list_since(None)
    assert listing == Records(())
    assert listing.to_payload() == []


def test_since_between_records(engine: QueryEngine) -> None:
    assert _ids(engine.list_since("2023-07-05T10:30:00Z")) == ["rec2"]


def test_since_before_everything_returns_full_snapshot(engine: QueryEngine) -> None:
    assert _ids(engine.list_since("2020-01-01T00:00:00Z")) == ["rec1", "rec2"]


@pytest.mark.parametrize(  # type: ignore[misc]
    "since",
    ["2023-07-05T11:00:00.000Z", "2023-07-05T12:00:00Z", "2030-01-01T00:00:00Z"],
)
def test_since_at_or_after_everything_returns_sentinel(engine: QueryEngine, since: str) -> None:
    listing = engine.list_since(since)
    assert listing.is_empty()
    assert listing.to_payload() == {"message": NO_RECORDS_MESSAGE}


def test_since_is_strict(engine: QueryEngine) -> None:
    """A record created exactly at `since` is excluded."""
    assert _ids(engine.list_since("2023-07-05T10:00:00Z")) == ["rec2"]


def test_since_accepts_offsets_and_datetimes(engine: QueryEngine) -> None:
    assert _ids(engine.list_since("2023-07-05T12:30:00+02:00")) == ["rec2"]
    assert _ids(engine.list_since(datetime(2023, 7, 5, 10, 30, tzinfo=UTC))) == ["rec2"]


def test_since_on_empty_store_returns_sentinel() -> None:
    listing = QueryEngine(CopyStore()).list_since("2023-07-05T10:30:00Z")
    assert listing == Empty()


def test_invalid_since_raises_invalid_argument(engine: QueryEngine) -> None:
    with pytest.raises(InvalidArgument) as info:
        engine.list_since("last tuesday")
    assert "last tuesday" in str(info.value)


def test_find_by_key_hit(engine: QueryEngine) -> None:
    record = engine.find_by_key("greeting")
    assert record.id == "rec2"
    assert record.key == "greeting"
    assert record.copy_text == "Hello, {name}!"


def test_find_by_key_miss(engine: QueryEngine) -> None:
    with pytest.raises(NotFound) as info:
        engine.find_by_key("nope")
    assert info.value.key == "nope"
    assert str(info.value) == "Key not found"


def test_find_by_key_first_match_wins() -> None:
    store = CopyStore()
    store.replace(
        CopyRecord.from_raw(
            {"id": rid, "createdTime": "2023-07-05T10:00:00Z", "fields": {"Key": "dup", "Copy": rid}}
        )
        for rid in ("first", "second")
    )
    assert QueryEngine(store).find_by_key("dup").id == "first"


def test_find_by_key_is_exact_match(engine: QueryEngine) -> None:
    with pytest.raises(NotFound):
        engine.find_by_key("Greeting")
