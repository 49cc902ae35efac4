"""
API Routes for copy text.

Endpoints
---------
- `GET /copy`: every record, or only those created after `?since=`.
- `GET|POST /copy/refresh`: re-fetch the whole table and return it.
- `GET /copy/{key}`: the first record carrying `key`; keys may contain `/`.

Design Decisions
----------------
- **Route order**: `/refresh` is registered before `/{key}` so it is never
  taken for a lookup key. `{key:path}` then catches everything else under
  `/copy/`, so a slashed key such as `errors/network` still resolves and a
  miss still gets the `{"error": "Key not found"}` body.
- **Blocking work off the loop**: service calls may hit the remote source
  (refresh, lazy first fetch), so they run in the worker thread pool.
- **Errors**: handlers raise domain errors; `copyhub.api.app` maps them to
  status codes.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool

from copyhub.api.schemas import CopyRecordPayload, ErrorPayload, MessagePayload
from copyhub.core.service import CopyService

router = APIRouter(prefix="/copy", tags=["Copy"])


def get_copy_service(request: Request) -> CopyService:
    """Dependency returning the service created by the app lifespan."""
    service: CopyService = request.app.state.copy_service
    return service


@router.get(
    "",
    response_model=list[CopyRecordPayload] | MessagePayload,
    summary="List copy records",
    responses={400: {"model": ErrorPayload}, 502: {"model": ErrorPayload}},
)
async def list_copy(
    since: str | None = Query(
        default=None,
        description="ISO-8601 timestamp; only records created strictly after it are returned.",
    ),
    service: CopyService = Depends(get_copy_service),
) -> Any:
    """
    Return all copy records in source order.

    With `since`, only records whose `createdTime` is strictly later are
    returned. If none are, the body is
    `{"message": "We don't have records after the specified time"}` with
    status 200.
    """
    listing = await run_in_threadpool(service.list_since, since)
    return listing.to_payload()


@router.api_route(
    "/refresh",
    methods=["GET", "POST"],
    response_model=list[CopyRecordPayload],
    summary="Re-fetch copy from the remote source",
    responses={502: {"model": ErrorPayload}},
)
async def refresh_copy(service: CopyService = Depends(get_copy_service)) -> Any:
    """Replace the cached snapshot with a fresh fetch and return it."""
    records = await run_in_threadpool(service.refresh)
    return [record.to_raw() for record in records]


@router.get(
    "/{key:path}",
    response_model=CopyRecordPayload,
    summary="Look up one copy record by key",
    responses={404: {"model": ErrorPayload}, 502: {"model": ErrorPayload}},
)
async def get_copy(key: str, service: CopyService = Depends(get_copy_service)) -> Any:
    """Return the first record whose `Key` equals `key`, or 404."""
    record = await run_in_threadpool(service.find_by_key, key)
    return record.to_raw()


__all__ = ["get_copy_service", "router"]
