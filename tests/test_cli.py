from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from cli.main import app

runner = CliRunner()

WIDE = {"COLUMNS": "200"}


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("CALENDLY_API_KEY", "KLAVIYO_API_KEY"):
        monkeypatch.delenv(name, raising=False)


def test_tools_lists_every_tool():
    result = runner.invoke(app, ["tools"], env=WIDE)
    assert result.exit_code == 0
    for name in ("calendly", "semrush", "tiktok-ads", "wistia"):
        assert name in result.stdout


def test_tool_passthrough_dry_run():
    result = runner.invoke(app, ["calendly", "users", "me", "--dry-run"], env={"CALENDLY_API_KEY": "cal-key"})
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["url"] == "https://api.calendly.com/users/me"
    assert "cal-key" not in result.stdout


def test_tool_passthrough_missing_credential():
    result = runner.invoke(app, ["klaviyo", "lists", "list"])
    assert result.exit_code == 1
    assert "KLAVIYO_API_KEY environment variable required" in result.output


def test_doctor_reports_missing_variables():
    result = runner.invoke(app, ["doctor", "run", "--tool", "calendly"], env=WIDE)
    assert result.exit_code == 0
    assert "CALENDLY_API_KEY" in result.stdout
    assert "MISSING" in result.stdout


def test_doctor_never_prints_values():
    result = runner.invoke(app, ["doctor", "run", "--tool", "calendly"], env={**WIDE, "CALENDLY_API_KEY": "cal-key"})
    assert "SET" in result.stdout
    assert "cal-key" not in result.stdout


def test_doctor_rejects_unknown_tool():
    result = runner.invoke(app, ["doctor", "run", "--tool", "nope"])
    assert result.exit_code != 0
