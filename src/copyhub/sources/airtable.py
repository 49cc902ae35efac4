# -----------------------------------------------------------------------------
# Airtable list-records client.
#
# Reads a whole table through the REST API:
#
#     GET {api_url}/{base_id}/{table}?pageSize=100[&view=...][&offset=...]
#     Authorization: Bearer <token>
#
# Airtable returns at most 100 rows per page plus an `offset` cursor while more
# rows remain; we follow it until it disappears and concatenate the pages in
# order. The rows are returned untouched (`{id, createdTime, fields}`), so the
# caller decides how to validate them.
#
# Like the rest of the package's HTTP code this uses only `urllib.request`.
# Unit tests patch `_get()` so no real network calls are made.
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from copyhub.core.contracts.copy_record import RawRecord
from copyhub.core.errors import RemoteFetchFailure
from copyhub.core.settings import DEFAULT_AIRTABLE_API_URL, Settings, get_logger

PAGE_SIZE = 100
# Guard against a server that keeps handing back a cursor.
MAX_PAGES = 1000

logger = get_logger("copyhub.sources.airtable")


@dataclass(slots=True)
class AirtableSource:
    """Fetch every row of one Airtable table.

    Parameters
    ----------
    api_key:
        Personal access token sent as a Bearer token.
    base_id:
        Airtable base identifier (``app...``).
    table:
        Table name or id.
    view:
        Optional view name; Airtable then applies the view's filters and sort.
    api_url:
        API root, overridable for proxies and tests.
    timeout_seconds:
        Per-request network timeout.
    """

    api_key: str | None
    base_id: str | None
    table: str = "Copy"
    view: str | None = None
    api_url: str = DEFAULT_AIRTABLE_API_URL
    timeout_seconds: float = 30.0

    # --------------------------------------------------------------------- #
    # Constructors
    # --------------------------------------------------------------------- #
    @classmethod
    def from_settings(cls, settings: Settings) -> AirtableSource:
        """Build a source from the ``AIRTABLE_*`` settings.

        Missing credentials are not rejected here; :meth:`fetch_all` reports
        them as a :class:`RemoteFetchFailure` so the API can still start.
        """
        return cls(
            api_key=settings.airtable_api_key,
            base_id=settings.airtable_base_id,
            table=settings.airtable_table,
            view=settings.airtable_view,
            api_url=settings.airtable_api_url,
            timeout_seconds=settings.fetch_timeout_seconds,
        )

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #
    @property
    def table_url(self) -> str:
        """Fully-qualified list-records URL without query parameters."""
        base = self.api_url.rstrip("/")
        return f"{base}/{self.base_id}/{urllib.parse.quote(self.table, safe='')}"

    def fetch_all(self) -> list[RawRecord]:
        """Return every record of the table across all pages.

        Raises
        ------
        RemoteFetchFailure
            On missing configuration, HTTP or network errors, an undecodable
            body, or a page without a ``records`` list.
        """
        if not self.api_key:
            raise RemoteFetchFailure("Missing AIRTABLE_API_KEY; cannot fetch copy.")
        if not self.base_id:
            raise RemoteFetchFailure("Missing AIRTABLE_BASE_ID; cannot fetch copy.")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

        records: list[RawRecord] = []
        offset: str | None = None
        for page in range(1, MAX_PAGES + 1):
            body = self._get(url=self._page_url(offset), headers=headers)
            page_records = body.get("records")
            if not isinstance(page_records, list):
                raise RemoteFetchFailure(f"Airtable page {page} has no 'records' list.")
            records.extend(page_records)

            next_offset = body.get("offset")
            if not next_offset:
                logger.debug("Fetched %d records in %d page(s)", len(records), page)
                return records
            offset = str(next_offset)

        raise RemoteFetchFailure(f"Airtable kept paging past {MAX_PAGES} pages; giving up.")

    # --------------------------------------------------------------------- #
    # Internal helpers
    # --------------------------------------------------------------------- #
    def _page_url(self, offset: str | None) -> str:
        params: dict[str, str] = {"pageSize": str(PAGE_SIZE)}
        if self.view:
            params["view"] = self.view
        if offset:
            params["offset"] = offset
        return f"{self.table_url}?{urllib.parse.urlencode(params)}"

    def _get(self, *, url: str, headers: Mapping[str, str]) -> dict[str, Any]:
        """Perform an HTTP GET request and decode the JSON response.

        This is the seam for unit tests: patch it on the class to return
        canned pages without any network I/O.
        """
        request = urllib.request.Request(url=url, headers=dict(headers), method="GET")

        try:
            with urllib.request.urlopen(request, timeout=self.timeout_seconds) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            raise RemoteFetchFailure(
                f"Airtable HTTP error {exc.code}: {exc.reason}; body={detail!r}",
                status_code=exc.code,
            ) from exc
        except urllib.error.URLError as exc:
            raise RemoteFetchFailure(f"Airtable network error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise RemoteFetchFailure(
                f"Airtable request timed out after {self.timeout_seconds}s"
            ) from exc

        try:
            decoded = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise RemoteFetchFailure("Failed to decode Airtable response as JSON") from exc

        if not isinstance(decoded, dict):
            raise RemoteFetchFailure("Airtable response is not a JSON object")
        return decoded


__all__ = ["AirtableSource", "MAX_PAGES", "PAGE_SIZE"]
