"""CopyRecord: one unit of displayable UI copy.

The remote table delivers rows shaped like::

    {
        "id": "rec1",
        "createdTime": "2023-07-05T10:00:00.000Z",
        "fields": {"Key": "intro", "Copy": "Welcome to our app!"}
    }

Consumers depend on exactly this shape (including the nested ``fields``
wrapper and the capitalized sub-keys), so :meth:`CopyRecord.to_raw` rebuilds
it and echoes ``createdTime`` verbatim. Comparisons use the parsed,
timezone-aware :attr:`CopyRecord.created_at`.

Notes
-----
- Airtable omits empty cells, so a missing ``Key`` or ``Copy`` becomes ``""``.
- A missing ``id`` or an unparsable ``createdTime`` is a malformed row and
  raises ``ValueError`` (pydantic's ``ValidationError`` is one).
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

RawRecord = Mapping[str, Any]


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC ``datetime``.

    Accepts a trailing ``Z``, explicit offsets, and fractional seconds. Naive
    values (no offset) are taken to be UTC.

    Raises
    ------
    ValueError
        If ``value`` is empty, not ISO-8601, or its offset pushes it outside
        the representable UTC range.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if not text:
            raise ValueError("timestamp is empty")
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"not an ISO-8601 timestamp: {value!r}") from exc

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except OverflowError as exc:
        # e.g. 0001-01-01T00:00:00+01:00 lands before datetime.min in UTC
        raise ValueError(f"timestamp out of range in UTC: {value!r}") from exc


class CopyRecord(BaseModel):
    """An immutable copy entry as served to consumers."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Opaque record id from the remote source")
    created_time: str = Field(description="ISO-8601 creation time, echoed verbatim")
    created_at: datetime = Field(description="Parsed `created_time` in UTC")
    key: str = Field(default="", description="Lookup key, not guaranteed unique")
    copy_text: str = Field(default="", description="Display text; placeholders untouched")

    @model_validator(mode="before")
    @classmethod
    def _derive_created_at(cls, data: Any) -> Any:
        """Fill `created_at` from `created_time` so callers only pass the string."""
        if isinstance(data, dict) and "created_at" not in data:
            created_time = data.get("created_time")
            if not isinstance(created_time, str):
                raise ValueError("createdTime must be an ISO-8601 string")
            return {**data, "created_at": parse_timestamp(created_time)}
        return data

    # ----- Wire format -------------------------------------------------------
    @classmethod
    def from_raw(cls, raw: RawRecord) -> CopyRecord:
        """Build a record from the remote `{id, createdTime, fields}` shape."""
        if not isinstance(raw, Mapping):
            raise ValueError(f"record must be an object, got {type(raw).__name__}")

        fields = raw.get("fields") or {}
        if not isinstance(fields, Mapping):
            raise ValueError(f"record {raw.get('id')!r} has non-object 'fields'")

        return cls(
            id=raw.get("id"),
            created_time=raw.get("createdTime"),
            key=fields.get("Key", ""),
            copy_text=fields.get("Copy", ""),
        )

    def to_raw(self) -> dict[str, Any]:
        """Return the consumer-facing JSON shape."""
        return {
            "id": self.id,
            "createdTime": self.created_time,
            "fields": {"Key": self.key, "Copy": self.copy_text},
        }


__all__ = ["CopyRecord", "RawRecord", "parse_timestamp"]
