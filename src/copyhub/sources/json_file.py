"""Local JSON file source, for development and offline demos.

The file may hold either a bare list of records or an Airtable-style
envelope ``{"records": [...]}``, so an exported API response can be dropped
in as-is.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from copyhub.core.contracts.copy_record import RawRecord
from copyhub.core.errors import RemoteFetchFailure


@dataclass(slots=True)
class JsonFileSource:
    """Read raw copy records from ``path`` on every fetch."""

    path: Path

    def fetch_all(self) -> list[RawRecord]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as exc:
            raise RemoteFetchFailure(f"Copy file not found: {self.path}") from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise RemoteFetchFailure(f"Could not read copy file {self.path}: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("records")
        if not isinstance(data, list):
            raise RemoteFetchFailure(
                f"Copy file {self.path} must contain a list or a {{'records': [...]}} object"
            )
        return data


__all__ = ["JsonFileSource"]
