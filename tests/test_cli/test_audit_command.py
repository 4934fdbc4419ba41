"""Test the audit relay command."""

import base64
import json
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from typer.testing import CliRunner

from cloudrun_slack_bot.cli.main import app

runner = CliRunner()

PROJECTS = [
    {
        "id": "test-project",
        "region": "asia-northeast1",
        "defaultChannel": "#deploys",
        "serviceChannels": {"my-service": "#my-service"},
    }
]


def push_body(service_name: str = "my-service") -> bytes:
    entry = {
        "resource": {
            "type": "cloud_run_revision",
            "labels": {"project_id": "test-project", "service_name": service_name},
        },
        "severity": "NOTICE",
        "protoPayload": {"methodName": "google.cloud.run.v1.Services.ReplaceService"},
    }
    data = base64.b64encode(json.dumps(entry).encode()).decode()
    return json.dumps({"message": {"data": data, "messageId": "1"}}).encode()


@pytest.fixture
def relay_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    monkeypatch.setenv("PROJECTS_CONFIG", json.dumps(PROJECTS))
    monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-test")
    monkeypatch.delenv("SLACK_CHANNEL", raising=False)
    return monkeypatch


@patch("cloudrun_slack_bot.cli.audit.SlackClient")
def test_relay_from_stdin(mock_slack: Mock, relay_env: pytest.MonkeyPatch) -> None:
    mock_slack.return_value.post_attachment.return_value = True

    result = runner.invoke(app, ["audit", "relay"], input=push_body())

    assert result.exit_code == 0, result.stdout
    assert "Posted audit event to #my-service" in result.stdout
    assert mock_slack.return_value.post_attachment.call_args.args[0] == "#my-service"


@patch("cloudrun_slack_bot.cli.audit.SlackClient")
def test_relay_from_file(
    mock_slack: Mock, relay_env: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    mock_slack.return_value.post_attachment.return_value = True
    event_file = tmp_path / "event.json"
    event_file.write_bytes(push_body("other-service"))

    result = runner.invoke(app, ["audit", "relay", "--file", str(event_file)])

    assert result.exit_code == 0, result.stdout
    assert mock_slack.return_value.post_attachment.call_args.args[0] == "#deploys"


@patch("cloudrun_slack_bot.cli.audit.SlackClient")
def test_relay_dry_run(mock_slack: Mock, relay_env: pytest.MonkeyPatch) -> None:
    result = runner.invoke(app, ["audit", "relay", "--dry-run"], input=push_body())

    assert result.exit_code == 0, result.stdout
    assert "Channel: #my-service" in result.stdout
    assert '"color": "good"' in result.stdout
    mock_slack.return_value.post_attachment.assert_not_called()


@patch("cloudrun_slack_bot.cli.audit.SlackClient")
def test_relay_post_failure(mock_slack: Mock, relay_env: pytest.MonkeyPatch) -> None:
    mock_slack.return_value.post_attachment.return_value = False

    result = runner.invoke(app, ["audit", "relay"], input=push_body())

    assert result.exit_code == 1
    assert "Failed to post audit event to #my-service" in result.stdout


def test_relay_invalid_body(relay_env: pytest.MonkeyPatch) -> None:
    result = runner.invoke(app, ["audit", "relay"], input=b"not json")

    assert result.exit_code == 1
    assert "Failed to parse Pub/Sub message" in result.stdout
