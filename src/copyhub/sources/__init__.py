from __future__ import annotations

from pathlib import Path

from copyhub.core.settings import Settings

from .airtable import AirtableSource
from .base import RemoteSource
from .json_file import JsonFileSource


def build_source(settings: Settings) -> RemoteSource:
    """Return the remote source selected by ``settings.source``."""
    if settings.source == "file":
        return JsonFileSource(path=Path(settings.copy_file))
    return AirtableSource.from_settings(settings)


__all__ = [
    "AirtableSource",
    "JsonFileSource",
    "RemoteSource",
    "build_source",
]
