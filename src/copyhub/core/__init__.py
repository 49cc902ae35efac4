"""Core package for CopyHub: records, snapshot store, queries, and refresh.

Typical imports:
    from copyhub.core.service import CopyService
    from copyhub.core.settings import load_settings, get_logger
"""

from __future__ import annotations

__all__ = ["__doc__"]
