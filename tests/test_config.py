"""Tests for environment-based bot configuration."""

import json
from datetime import timedelta

import pytest

from cloudrun_slack_bot.config import (
    DEFAULT_DEBUG_TIME_WINDOW,
    DEFAULT_MODEL_NAME,
    BotConfig,
    ProjectConfig,
    parse_projects_config,
)
from cloudrun_slack_bot.errors import ConfigError

PROJECTS = [
    {
        "id": "project-a",
        "region": "us-central1",
        "defaultChannel": "#team-a",
        "serviceChannels": {"api": "#api-alerts"},
    },
    {"id": "project-b", "region": "europe-west1", "defaultChannel": "#team-a"},
    {"id": "project-c", "region": "asia-northeast1"},
]

ENV_VARS = [
    "PROJECTS_CONFIG",
    "SLACK_CHANNEL",
    "SLACK_BOT_TOKEN",
    "DEBUG_ENABLED",
    "GCP_PROJECT_ID",
    "VERTEX_LOCATION",
    "MODEL_NAME",
    "DEBUG_TIME_WINDOW",
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove all bot settings from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def config() -> BotConfig:
    return BotConfig(
        projects=[ProjectConfig.model_validate(p) for p in PROJECTS],
        default_channel="#general",
        slack_bot_token="xoxb-test",
    )


class TestParseProjectsConfig:
    """Test PROJECTS_CONFIG parsing."""

    def test_valid_config(self) -> None:
        projects = parse_projects_config(json.dumps(PROJECTS))

        assert [p.id for p in projects] == ["project-a", "project-b", "project-c"]
        assert projects[0].service_channels == {"api": "#api-alerts"}
        assert projects[2].default_channel == ""

    def test_invalid_json(self) -> None:
        with pytest.raises(ConfigError, match="Failed to parse PROJECTS_CONFIG"):
            parse_projects_config("{not json")

    @pytest.mark.parametrize("raw", ["[]", '{"id": "p"}'])
    def test_empty_or_not_a_list(self, raw: str) -> None:
        with pytest.raises(ConfigError, match="at least one project"):
            parse_projects_config(raw)

    @pytest.mark.parametrize(
        "project", [{"id": "", "region": "us-central1"}, {"id": "p"}]
    )
    def test_invalid_project(self, project: dict) -> None:
        with pytest.raises(ConfigError, match="project 0"):
            parse_projects_config(json.dumps([project]))


class TestFromEnv:
    """Test loading BotConfig from the environment."""

    def test_missing_projects_config(self, clean_env: pytest.MonkeyPatch) -> None:
        with pytest.raises(ConfigError, match="PROJECTS_CONFIG"):
            BotConfig.from_env()

    def test_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("PROJECTS_CONFIG", json.dumps(PROJECTS))

        config = BotConfig.from_env()

        assert len(config.projects) == 3
        assert config.debug_enabled is False
        assert config.model_name == DEFAULT_MODEL_NAME
        assert config.debug_time_window == DEFAULT_DEBUG_TIME_WINDOW
        assert config.lookback == timedelta(minutes=30)

    def test_debug_settings(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("PROJECTS_CONFIG", json.dumps(PROJECTS))
        clean_env.setenv("DEBUG_ENABLED", "true")
        clean_env.setenv("GCP_PROJECT_ID", "ai-project")
        clean_env.setenv("VERTEX_LOCATION", "us-central1")
        clean_env.setenv("MODEL_NAME", "gemini-2.5-pro")
        clean_env.setenv("DEBUG_TIME_WINDOW", "60")

        config = BotConfig.from_env()

        assert config.debug_enabled is True
        assert config.gcp_project_id == "ai-project"
        assert config.model_name == "gemini-2.5-pro"
        assert config.lookback == timedelta(minutes=60)
        assert config.uses_vertex

    @pytest.mark.parametrize("value", ["abc", "0", "-5"])
    def test_invalid_time_window_uses_default(
        self, clean_env: pytest.MonkeyPatch, value: str
    ) -> None:
        clean_env.setenv("PROJECTS_CONFIG", json.dumps(PROJECTS))
        clean_env.setenv("DEBUG_TIME_WINDOW", value)

        assert BotConfig.from_env().debug_time_window == DEFAULT_DEBUG_TIME_WINDOW

    def test_debug_enabled_requires_exact_true(
        self, clean_env: pytest.MonkeyPatch
    ) -> None:
        clean_env.setenv("PROJECTS_CONFIG", json.dumps(PROJECTS))
        clean_env.setenv("DEBUG_ENABLED", "yes")

        assert BotConfig.from_env().debug_enabled is False


class TestValidation:
    """Test BotConfig validation."""

    def test_valid(self, config: BotConfig) -> None:
        config.validate_settings()

    def test_missing_bot_token(self, config: BotConfig) -> None:
        config.slack_bot_token = None
        with pytest.raises(ConfigError, match="SLACK_BOT_TOKEN"):
            config.validate_settings()

    def test_bot_token_is_the_only_slack_setting_required(
        self, clean_env: pytest.MonkeyPatch
    ) -> None:
        clean_env.setenv("PROJECTS_CONFIG", json.dumps(PROJECTS))
        clean_env.setenv("SLACK_BOT_TOKEN", "xoxb-test")

        config = BotConfig.from_env()

        config.validate_settings()
        assert set(BotConfig.model_fields) == {
            "projects",
            "default_channel",
            "slack_bot_token",
            "debug_enabled",
            "gcp_project_id",
            "vertex_location",
            "model_name",
            "debug_time_window",
        }

    def test_debug_requires_gcp_settings(self, config: BotConfig) -> None:
        config.debug_enabled = True
        with pytest.raises(ConfigError, match="GCP_PROJECT_ID"):
            config.validate_debug()

        config.gcp_project_id = "ai-project"
        with pytest.raises(ConfigError, match="VERTEX_LOCATION"):
            config.validate_debug()

        config.vertex_location = "us-central1"
        config.validate_debug()


class TestChannelMapping:
    """Test channel and project lookups."""

    def test_channel_to_projects(self, config: BotConfig) -> None:
        assert config.channel_to_projects == {
            "#team-a": ["project-a", "project-b"],
            "#api-alerts": ["project-a"],
        }

    def test_projects_for_channel(self, config: BotConfig) -> None:
        assert config.projects_for_channel("#api-alerts") == ["project-a"]
        assert config.projects_for_channel("#unknown") == []

    def test_channel_for_service(self, config: BotConfig) -> None:
        assert config.channel_for_service("project-a", "api") == "#api-alerts"
        assert config.channel_for_service("project-a", "worker") == "#team-a"
        assert config.channel_for_service("project-c", "api") == "#general"
        assert config.channel_for_service("unknown", "api") == "#general"

    def test_project_config(self, config: BotConfig) -> None:
        project = config.project_config("project-b")
        assert project is not None
        assert project.region == "europe-west1"
        assert config.project_config("unknown") is None

    def test_uses_vertex(self, config: BotConfig) -> None:
        assert config.uses_vertex
        config.model_name = "openai:gpt-4o-mini"
        assert not config.uses_vertex

    def test_summary_lines(self, config: BotConfig) -> None:
        lines = config.summary_lines()

        assert lines[0] == "Default Channel: #general"
        assert lines[1] == "Projects:"
        assert (
            "  - Channel '#team-a' -> Projects ['project-a', 'project-b'] "
            "(manual selection required)"
        ) in lines
        assert (
            "  - Channel '#api-alerts' -> Project 'project-a' (auto-detect enabled)"
        ) in lines
        assert not any("xoxb" in line for line in lines)
