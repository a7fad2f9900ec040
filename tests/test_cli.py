from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from archyra.cli import app
from archyra.tooling.registry import load_registry

runner = CliRunner()

EXPECTED_ENTRY = {"command": "npx", "args": ["-y", "archyra@latest", "serve"]}


def _read(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.mark.parametrize("args", [[], ["--help"], ["-h"]])
def test_help_exits_zero(args: list[str]) -> None:
    result = runner.invoke(app, args)
    assert result.exit_code == 0
    assert "init" in result.output
    assert "serve" in result.output


def test_unknown_command_fails() -> None:
    result = runner.invoke(app, ["frobnicate"])
    assert result.exit_code != 0
    assert "Unknown command" in result.output


def test_init_with_client_flag_creates_config(fake_home: Path) -> None:
    result = runner.invoke(app, ["init", "--client", "claude"])

    assert result.exit_code == 0, result.output
    target = fake_home / ".claude" / "claude_desktop_config.json"
    assert _read(target) == {"mcpServers": {"archyra": EXPECTED_ENTRY}}
    assert "Created new config at" in result.output
    assert "Successfully configured archyra for Claude Code!" in result.output


def test_init_client_flag_is_case_insensitive(fake_home: Path) -> None:
    result = runner.invoke(app, ["init", "--client", "CURSOR"])

    assert result.exit_code == 0, result.output
    assert _read(Path.cwd() / ".cursor" / "mcp.json")["mcpServers"]["archyra"] == EXPECTED_ENTRY


def test_init_uses_existing_secondary_path(fake_home: Path) -> None:
    existing = fake_home / ".mcp.json"
    existing.write_text('{"mcpServers": {"other": {"command": "x", "args": []}}, "unrelatedKey": 42}', encoding="utf-8")

    result = runner.invoke(app, ["init", "--client", "claude"])

    assert result.exit_code == 0, result.output
    document = _read(existing)
    assert document["unrelatedKey"] == 42
    assert document["mcpServers"]["other"] == {"command": "x", "args": []}
    assert document["mcpServers"]["archyra"] == EXPECTED_ENTRY
    assert not (fake_home / ".claude").exists()


def test_init_unknown_client_exits_non_zero(fake_home: Path) -> None:
    result = runner.invoke(app, ["init", "--client", "vim"])

    assert result.exit_code == 2
    assert "Unknown client: vim" in result.output
    assert "claude, cursor, windsurf" in result.output


def test_init_interactive_reprompts_until_valid(fake_home: Path) -> None:
    result = runner.invoke(app, ["init"], input="9\nabc\n\n3\n")

    assert result.exit_code == 0, result.output
    assert result.output.count("Invalid selection. Please try again.") == 3
    assert _read(fake_home / ".codeium" / "windsurf" / "mcp_config.json")["mcpServers"]["archyra"] == EXPECTED_ENTRY


def test_init_declined_overwrite_skips(fake_home: Path) -> None:
    target = fake_home / ".codeium" / "windsurf" / "mcp_config.json"
    target.parent.mkdir(parents=True)
    original = '{"mcpServers": {"archyra": {"command": "node", "args": ["server.js"]}}}'
    target.write_text(original, encoding="utf-8")

    result = runner.invoke(app, ["init", "--client", "windsurf"], input="n\n")

    assert result.exit_code == 0, result.output
    assert "Skipping configuration." in result.output
    assert target.read_text(encoding="utf-8") == original


def test_init_confirmed_overwrite_replaces_entry(fake_home: Path) -> None:
    target = fake_home / ".codeium" / "windsurf" / "mcp_config.json"
    target.parent.mkdir(parents=True)
    target.write_text('{"mcpServers": {"archyra": {"command": "node", "args": ["server.js"]}}}', encoding="utf-8")

    result = runner.invoke(app, ["init", "--client", "windsurf"], input="y\n")

    assert result.exit_code == 0, result.output
    assert _read(target)["mcpServers"]["archyra"] == EXPECTED_ENTRY


def test_init_write_failure_exits_one(fake_home: Path) -> None:
    (fake_home / ".codeium").write_text("", encoding="utf-8")

    result = runner.invoke(app, ["init", "--client", "windsurf"])

    assert result.exit_code == 1
    assert "Failed to write" in result.output


def test_serve_runs_stdio_server(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr("archyra.server.run_stdio_server", lambda settings: calls.append(settings))

    result = runner.invoke(app, ["serve"])

    assert result.exit_code == 0, result.output
    assert len(calls) == 1
    assert calls[0].server_name == "archyra"


def test_serve_reports_missing_server(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "archyra.server", None)

    result = runner.invoke(app, ["serve"])

    assert result.exit_code == 1
    assert "MCP server not found" in result.output


def test_list_json_matches_registry() -> None:
    result = runner.invoke(app, ["list", "--category", "loading", "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    expected = [entry.id for entry in load_registry().list_components("loading")]
    assert [item["id"] for item in payload["components"]] == expected
    assert payload["total"] == len(expected)


def test_list_text_output() -> None:
    result = runner.invoke(app, ["list"])

    assert result.exit_code == 0, result.output
    assert "LoadingDots (loading-dots) [loading]" in result.output


def test_list_rejects_unknown_category() -> None:
    result = runner.invoke(app, ["list", "--category", "widgets"])
    assert result.exit_code == 2


def test_init_ignores_malformed_project_settings(fake_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (Path.cwd() / "pyproject.toml").write_text("[project\nname=", encoding="utf-8")
    monkeypatch.delenv("ARCHYRA_CONFIG")

    result = runner.invoke(app, ["init", "--client", "windsurf"])

    assert result.exit_code == 0, result.output
    assert _read(fake_home / ".codeium" / "windsurf" / "mcp_config.json")["mcpServers"]["archyra"] == EXPECTED_ENTRY
