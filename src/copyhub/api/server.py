"""
ASGI Entry Point for the CopyHub API.

This module exposes the `app` object required by ASGI servers (Uvicorn/Gunicorn).
It loads environment variables from `.env` before the settings are read, so
`AIRTABLE_API_KEY` and friends can live in a local file during development.

Usage
-----
Run via the module entry point:
    $ python -m copyhub.api.server

Or via uvicorn directly:
    $ uvicorn copyhub.api.server:app --reload
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(".env"))

from copyhub.api.app import create_app  # noqa: E402
from copyhub.core.settings import load_settings  # noqa: E402

# Settings may have been cached before .env was loaded.
load_settings.cache_clear()

app = create_app()


def main() -> None:
    """Run the API server locally for development."""
    cfg = load_settings()
    uvicorn.run(
        "copyhub.api.server:app",
        host=cfg.host,
        port=cfg.port,
        reload=cfg.is_dev,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    main()
