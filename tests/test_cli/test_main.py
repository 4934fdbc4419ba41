"""Test main CLI functionality."""

import json

import pytest
from typer.testing import CliRunner

from cloudrun_slack_bot.cli.main import app

runner = CliRunner()

PROJECTS = [{"id": "my-project", "region": "us-central1", "defaultChannel": "#ops"}]


def test_version_command() -> None:
    """Test version command."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "Cloud Run Slack Bot v" in result.stdout


def test_help_lists_subcommands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "debug" in result.stdout
    assert "config" in result.stdout


def test_config_show(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROJECTS_CONFIG", json.dumps(PROJECTS))
    monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-secret")
    monkeypatch.delenv("DEBUG_ENABLED", raising=False)

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    assert "my-project" in result.stdout
    assert "auto-detect enabled" in result.stdout
    assert "xoxb-secret" not in result.stdout


def test_config_show_warns_on_invalid_settings(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PROJECTS_CONFIG", json.dumps(PROJECTS))
    monkeypatch.delenv("SLACK_BOT_TOKEN", raising=False)

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    assert "SLACK_BOT_TOKEN is required" in result.stdout


def test_config_show_without_projects(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PROJECTS_CONFIG", raising=False)

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 1
    assert "PROJECTS_CONFIG env var is required" in result.stdout
