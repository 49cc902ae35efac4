"""Centralized application configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
SourceName = Literal["airtable", "file"]

DEFAULT_AIRTABLE_API_URL = "https://api.airtable.com/v0"


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `COPYHUB_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    source : SourceName
        Which remote source feeds the snapshot; maps from `COPYHUB_SOURCE`.
    airtable_api_key, airtable_base_id, airtable_table, airtable_view
        Airtable credentials and table coordinates (`AIRTABLE_*`).
    copy_file : str
        JSON file read when `source == "file"`; maps from `COPYHUB_COPY_FILE`.
    lazy_load : bool
        Fetch on the first read if nothing has been loaded yet.
    refresh_on_startup : bool
        Fetch once while the API starts up.
    """

    environment: EnvName = Field(default="dev", alias="COPYHUB_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")

    source: SourceName = Field(default="airtable", alias="COPYHUB_SOURCE")
    airtable_api_key: str | None = Field(default=None, alias="AIRTABLE_API_KEY")
    airtable_base_id: str | None = Field(default=None, alias="AIRTABLE_BASE_ID")
    airtable_table: str = Field(default="Copy", alias="AIRTABLE_TABLE")
    airtable_view: str | None = Field(default=None, alias="AIRTABLE_VIEW")
    airtable_api_url: str = Field(default=DEFAULT_AIRTABLE_API_URL, alias="AIRTABLE_API_URL")
    fetch_timeout_seconds: float = Field(default=30.0, gt=0, alias="COPYHUB_FETCH_TIMEOUT")
    copy_file: str = Field(default="copy.json", alias="COPYHUB_COPY_FILE")

    lazy_load: bool = Field(default=True, alias="COPYHUB_LAZY_LOAD")
    refresh_on_startup: bool = Field(default=False, alias="COPYHUB_REFRESH_ON_STARTUP")

    host: str = Field(default="0.0.0.0", alias="COPYHUB_HOST")
    port: int = Field(default=8000, alias="COPYHUB_PORT")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("COPYHUB_ENV", "dev")
    return Settings()


def get_logger(name: str = "copyhub") -> logging.Logger:
    """Return a process-global logger configured to the current log level.

    The level is read through `load_settings()` so a cache clear in tests is
    picked up by loggers created afterwards.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger


__all__ = ["Settings", "get_logger", "load_settings"]
