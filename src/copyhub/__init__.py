"""CopyHub: serve externally-managed UI copy from an in-memory snapshot.

Copy text lives in a remote table (Airtable). CopyHub pulls the whole table,
keeps it as one immutable snapshot in process memory, and serves it over HTTP
with since-filtering, key lookup, and an explicit refresh.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
