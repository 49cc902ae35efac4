"""
Pydantic response schemas for the CopyHub HTTP API.

These mirror the JSON existing consumers already parse, so field names are
kept exactly as they appear on the wire (``createdTime``, ``Key``, ``Copy``)
rather than converted to snake_case.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CopyFieldsPayload(BaseModel):
    """The ``fields`` wrapper of a copy record."""

    Key: str = Field(description="Lookup key")
    Copy: str = Field(description="Display text, placeholders such as {name} untouched")


class CopyRecordPayload(BaseModel):
    """One copy record as served to clients."""

    id: str
    createdTime: str = Field(description="ISO-8601 creation time from the remote source")
    fields: CopyFieldsPayload


class MessagePayload(BaseModel):
    """Informational body returned when a ``since`` filter matched nothing."""

    message: str


class ErrorPayload(BaseModel):
    """Structured error body."""

    error: str
    detail: str | None = None


class HealthPayload(BaseModel):
    """Liveness plus a summary of the live snapshot."""

    status: str
    environment: str
    version: str
    revision: int
    records: int


__all__ = [
    "CopyFieldsPayload",
    "CopyRecordPayload",
    "ErrorPayload",
    "HealthPayload",
    "MessagePayload",
]
