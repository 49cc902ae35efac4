# src/copyhub/cli.py
"""
CopyHub Command Line Interface (CLI).

Terminal access to the same copy the HTTP API serves, built with `typer` and
`rich`. Each command builds a fresh `CopyService` from the environment, so
the first read performs the fetch from the configured source.

Usage
-----
    # Show every record as a table
    $ copyhub list

    # Only records created after a point in time, as JSON
    $ copyhub list --since 2023-07-05T10:30:00Z --json

    # Look up one key
    $ copyhub get greeting

    # Start the HTTP API
    $ copyhub serve --port 8080
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from copyhub.core.contracts.copy_record import CopyRecord
from copyhub.core.errors import CopyHubError
from copyhub.core.query import Empty
from copyhub.core.service import CopyService
from copyhub.core.settings import load_settings

# Ensure env vars (like AIRTABLE_API_KEY) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="CopyHub: serve externally-managed UI copy.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _build_service() -> CopyService:
    """Create a service from the current environment (settings cache cleared)."""
    load_settings.cache_clear()
    return CopyService.from_settings(load_settings())


def _print_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, ensure_ascii=False))


def _render_records(records: Sequence[CopyRecord], title: str) -> None:
    """Render records as a Rich table in source order."""
    table = Table(title=title, show_lines=False)
    table.add_column("Key", style="bold cyan")
    table.add_column("Copy")
    table.add_column("Created", style="dim")
    table.add_column("Id", style="dim")
    for record in records:
        # Text cells skip markup parsing so copy like "[b]" prints literally.
        table.add_row(Text(record.key), Text(record.copy_text), record.created_time, record.id)
    console.print(table)


def _fail(exc: CopyHubError) -> typer.Exit:
    console.print(Text.assemble((f"❌ {type(exc).__name__}: ", "bold red"), str(exc)))
    return typer.Exit(code=1)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command("list")  # type: ignore[misc]
def list_copy(
    since: Annotated[
        str | None,
        typer.Option(
            "--since",
            "-s",
            help="ISO-8601 timestamp; only records created strictly after it.",
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the API's JSON body instead of a table."),
    ] = False,
) -> None:
    """List copy records, optionally filtered by creation time."""
    service = _build_service()
    try:
        listing = service.list_since(since)
    except CopyHubError as exc:
        raise _fail(exc) from exc
    finally:
        service.close()

    if as_json:
        _print_json(listing.to_payload())
        return

    if isinstance(listing, Empty):
        console.print(Text(listing.message, style="yellow"))
        return
    _render_records(listing.records, title="Copy")


@app.command("get")  # type: ignore[misc]
def get_copy(
    key: Annotated[str, typer.Argument(help="Lookup key, e.g. 'greeting'.")],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the record as JSON."),
    ] = False,
) -> None:
    """Show the first record whose key matches KEY."""
    service = _build_service()
    try:
        record = service.find_by_key(key)
    except CopyHubError as exc:
        raise _fail(exc) from exc
    finally:
        service.close()

    if as_json:
        _print_json(record.to_raw())
        return
    console.print(
        Panel(
            Text(record.copy_text),
            title=f"[bold cyan]{record.key}[/bold cyan]",
            subtitle=f"{record.id} · {record.created_time}",
            border_style="cyan",
        )
    )


@app.command("refresh")  # type: ignore[misc]
def refresh_copy(
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the fetched records as JSON."),
    ] = False,
) -> None:
    """Fetch the full table from the configured source and report it."""
    service = _build_service()
    try:
        records = service.refresh()
    except CopyHubError as exc:
        raise _fail(exc) from exc
    finally:
        service.close()

    if as_json:
        _print_json([record.to_raw() for record in records])
        return
    console.print(f"[bold green]✅ Fetched {len(records)} records.[/bold green]")


@app.command("serve")  # type: ignore[misc]
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port.")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Auto-reload on code changes.")] = False,
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    cfg = load_settings()
    uvicorn.run(
        "copyhub.api.server:app",
        host=host or cfg.host,
        port=port or cfg.port,
        reload=reload,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    app()
