# tests/test_cli.py
"""
Tests for the CopyHub command-line interface (CLI).

Scope
-----
1.  **Command Registration**: `--help` lists every command.
2.  **Reads**: `list` / `get` against a JSON copy file selected via env vars.
3.  **Error Handling**: domain errors exit with code 1, not a usage error (2).

We use `typer.testing.CliRunner` to invoke the app in-process.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from copyhub.cli import app


@pytest.fixture  # type: ignore[misc]
def runner() -> CliRunner:
    """Create a fresh CliRunner for each test."""
    return CliRunner()


@pytest.fixture  # type: ignore[misc]
def copy_file(tmp_path: Path, monkeypatch: Any, copy_data: list[dict[str, Any]]) -> Path:
    """Point the CLI at a local JSON copy file through the environment."""
    path = tmp_path / "copy.json"
    path.write_text(json.dumps(copy_data), encoding="utf-8")
    monkeypatch.setenv("COPYHUB_SOURCE", "file")
    monkeypatch.setenv("COPYHUB_COPY_FILE", str(path))
    return path


def test_cli_help_shows_usage(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0, f"Help failed: {result.output}"
    assert "CopyHub" in result.output
    for command in ("list", "get", "refresh", "serve"):
        assert command in result.output


def test_list_json_matches_api_body(
    runner: CliRunner, copy_file: Path, copy_data: list[dict[str, Any]]
) -> None:
    result = runner.invoke(app, ["list", "--json"])
    assert result.exit_code == 0, f"CLI Failed with Output:\n{result.output}"
    assert json.loads(result.output) == copy_data


def test_list_since_table_and_sentinel(runner: CliRunner, copy_file: Path) -> None:
    result = runner.invoke(app, ["list", "--since", "2023-07-05T10:30:00Z"])
    assert result.exit_code == 0, result.output
    assert "greeting" in result.output
    assert "intro" not in result.output

    result = runner.invoke(app, ["list", "--since", "2023-07-05T12:00:00Z"])
    assert result.exit_code == 0, result.output
    assert "We don't have records after the specified time" in result.output


def test_list_invalid_since_exits_1(runner: CliRunner, copy_file: Path) -> None:
    result = runner.invoke(app, ["list", "--since", "soon"])
    assert result.exit_code == 1, result.output
    assert "InvalidArgument" in result.output


def test_get_prints_copy_text(runner: CliRunner, copy_file: Path) -> None:
    result = runner.invoke(app, ["get", "greeting"])
    assert result.exit_code == 0, result.output
    assert "Hello, {name}!" in result.output


def test_get_missing_key_exits_1(runner: CliRunner, copy_file: Path) -> None:
    result = runner.invoke(app, ["get", "nope"])
    assert result.exit_code == 1, result.output
    assert "Key not found" in result.output


def test_refresh_reports_count(runner: CliRunner, copy_file: Path) -> None:
    result = runner.invoke(app, ["refresh"])
    assert result.exit_code == 0, result.output
    assert "Fetched 2 records" in result.output


def test_refresh_without_airtable_credentials_exits_1(runner: CliRunner, monkeypatch: Any) -> None:
    monkeypatch.setenv("COPYHUB_SOURCE", "airtable")
    monkeypatch.setenv("AIRTABLE_API_KEY", "")
    result = runner.invoke(app, ["refresh"])
    assert result.exit_code == 1, result.output
    assert "RemoteFetchFailure" in result.output


def test_serve_passes_options_to_uvicorn(runner: CliRunner) -> None:
    with patch("uvicorn.run") as mock_run:
        result = runner.invoke(app, ["serve", "--host", "127.0.0.1", "--port", "9001"])

    assert result.exit_code == 0, result.output
    mock_run.assert_called_once()
    assert mock_run.call_args.args[0] == "copyhub.api.server:app"
    assert mock_run.call_args.kwargs["host"] == "127.0.0.1"
    assert mock_run.call_args.kwargs["port"] == 9001
