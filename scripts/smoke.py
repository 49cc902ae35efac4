# scripts/smoke.py
"""
Smoke Test Script for a running CopyHub API.

Usage
-----
1. Start the API (any source):
    $ COPYHUB_SOURCE=file COPYHUB_COPY_FILE=copy.json copyhub serve

2. Exercise every endpoint:
    $ python scripts/smoke.py --base-url http://127.0.0.1:8000
"""

import argparse
import json
import logging
import sys
import urllib.error
import urllib.request
from typing import Any

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("copyhub.smoke")


def _call(method: str, url: str) -> tuple[int, Any]:
    request = urllib.request.Request(url=url, method=method)
    try:
        with urllib.request.urlopen(request, timeout=30) as resp:
            return resp.status, json.loads(resp.read().decode("utf-8"))
    except urllib.error.HTTPError as exc:
        return exc.code, json.loads(exc.read().decode("utf-8") or "null")


def main() -> int:
    """Run the smoke checks; return a process exit code."""
    parser = argparse.ArgumentParser(description="Run CopyHub API smoke test")
    parser.add_argument("--base-url", default="http://127.0.0.1:8000")
    args = parser.parse_args()
    base = args.base_url.rstrip("/")

    status, health = _call("GET", f"{base}/health")
    logger.info("GET /health -> %s %s", status, health)
    if status != 200:
        return 1

    status, records = _call("POST", f"{base}/copy/refresh")
    logger.info("POST /copy/refresh -> %s (%s records)", status, len(records or []))
    if status != 200:
        logger.error("Refresh failed: %s", records)
        return 1

    status, listing = _call("GET", f"{base}/copy?since=2999-01-01T00:00:00Z")
    logger.info("GET /copy?since=<future> -> %s %s", status, listing)

    if records:
        key = records[0]["fields"]["Key"]
        status, record = _call("GET", f"{base}/copy/{urllib.request.quote(key)}")
        logger.info("GET /copy/%s -> %s %s", key, status, record)

    status, missing = _call("GET", f"{base}/copy/__smoke_missing_key__")
    logger.info("GET /copy/<missing> -> %s %s", status, missing)
    return 0 if status == 404 else 1


if __name__ == "__main__":
    sys.exit(main())
