"""Unit tests for the CopyService lifecycle and lazy first fetch."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from copyhub.core.errors import NotFound, RemoteFetchFailure
from copyhub.core.query import Empty
from copyhub.core.service import CopyService
from copyhub.core.settings import Settings
from copyhub.sources import AirtableSource, JsonFileSource

from .conftest import FakeSource


def test_first_read_fetches_lazily_once(copy_data: list[dict[str, Any]]) -> None:
    source = FakeSource(copy_data)
    service = CopyService(source)

    assert source.calls == 0
    assert service.find_by_key("greeting").id == "rec2"
    assert service.list_since("2023-07-05T12:00:00Z") == Empty()
    assert source.calls == 1


def test_lazy_load_disabled_serves_empty_store(copy_data: list[dict[str, Any]]) -> None:
    source = FakeSource(copy_data)
    service = CopyService(source, lazy_load=False)

    assert service.list_since().to_payload() == []
    with pytest.raises(NotFound):
        service.find_by_key("greeting")
    assert source.calls == 0


def test_lazy_fetch_failure_propagates() -> None:
    service = CopyService(FakeSource(error=RemoteFetchFailure("down")))
    with pytest.raises(RemoteFetchFailure):
        service.list_since()


def test_start_with_warmup_populates_store(copy_data: list[dict[str, Any]]) -> None:
    source = FakeSource(copy_data)
    service = CopyService(source)
    service.start(refresh_on_startup=True)

    assert service.snapshot().revision == 1
    service.list_since()
    assert source.calls == 1


def test_failed_warmup_is_tolerated_and_retried_lazily(copy_data: list[dict[str, Any]]) -> None:
    source = FakeSource(copy_data, error=RemoteFetchFailure("cold start"))
    service = CopyService(source)
    service.start(refresh_on_startup=True)
    assert service.store.is_populated is False

    source.error = None
    assert service.find_by_key("intro").id == "rec1"


def test_close_marks_service_closed(copy_data: list[dict[str, Any]]) -> None:
    service = CopyService(FakeSource(copy_data))
    service.close()
    assert service.closed is True


def test_from_settings_picks_source(tmp_path: Path, copy_data: list[dict[str, Any]]) -> None:
    copy_file = tmp_path / "copy.json"
    copy_file.write_text(json.dumps(copy_data), encoding="utf-8")

    file_service = CopyService.from_settings(
        Settings(COPYHUB_SOURCE="file", COPYHUB_COPY_FILE=str(copy_file), COPYHUB_LAZY_LOAD=False)
    )
    assert isinstance(file_service.source, JsonFileSource)
    assert file_service.lazy_load is False

    airtable_service = CopyService.from_settings(
        Settings(COPYHUB_SOURCE="airtable", AIRTABLE_BASE_ID="appXYZ")
    )
    assert isinstance(airtable_service.source, AirtableSource)
    assert airtable_service.source.base_id == "appXYZ"
