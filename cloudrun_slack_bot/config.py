"""Configuration loaded from environment variables."""

import json
import logging
import os
from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gemini-2.5-flash-lite"
DEFAULT_DEBUG_TIME_WINDOW = 30


class ProjectConfig(BaseModel):
    """Configuration for a single GCP project."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="GCP project id")
    region: str = Field(description="Cloud Run region")
    default_channel: str = Field(default="", alias="defaultChannel")
    service_channels: dict[str, str] = Field(
        default_factory=dict, alias="serviceChannels"
    )

    @field_validator("id", "region")
    @classmethod
    def validate_required(cls, v: str) -> str:
        """Reject empty project ids and regions."""
        if not v:
            raise ValueError("must not be empty")
        return v


def parse_projects_config(raw: str) -> list[ProjectConfig]:
    """Parse the PROJECTS_CONFIG JSON list.

    Raises:
        ConfigError: If the value is not valid JSON or a project is invalid
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse PROJECTS_CONFIG: {e}") from e
    if not isinstance(data, list) or not data:
        raise ConfigError(
            "Invalid PROJECTS_CONFIG: at least one project must be configured"
        )

    projects = []
    for i, item in enumerate(data):
        try:
            projects.append(ProjectConfig.model_validate(item))
        except ValidationError as e:
            raise ConfigError(f"Invalid PROJECTS_CONFIG: project {i}: {e}") from e
    return projects


def _parse_time_window(value: str | None) -> int:
    try:
        minutes = int(value) if value else 0
    except ValueError:
        logger.warning("Ignoring invalid DEBUG_TIME_WINDOW %r", value)
        minutes = 0
    return minutes if minutes > 0 else DEFAULT_DEBUG_TIME_WINDOW


class BotConfig(BaseModel):
    """Multi-project bot configuration."""

    projects: list[ProjectConfig]
    default_channel: str = ""
    slack_bot_token: str | None = None

    # Debug feature
    debug_enabled: bool = False
    gcp_project_id: str = ""
    vertex_location: str = ""
    model_name: str = DEFAULT_MODEL_NAME
    debug_time_window: int = DEFAULT_DEBUG_TIME_WINDOW

    @classmethod
    def from_env(cls) -> "BotConfig":
        """Load configuration from environment variables.

        Raises:
            ConfigError: If PROJECTS_CONFIG is missing or invalid
        """
        projects_config = os.getenv("PROJECTS_CONFIG")
        if not projects_config:
            raise ConfigError("PROJECTS_CONFIG env var is required")

        return cls(
            projects=parse_projects_config(projects_config),
            default_channel=os.getenv("SLACK_CHANNEL", ""),
            slack_bot_token=os.getenv("SLACK_BOT_TOKEN"),
            debug_enabled=os.getenv("DEBUG_ENABLED") == "true",
            gcp_project_id=os.getenv("GCP_PROJECT_ID", ""),
            vertex_location=os.getenv("VERTEX_LOCATION", ""),
            model_name=os.getenv("MODEL_NAME") or DEFAULT_MODEL_NAME,
            debug_time_window=_parse_time_window(os.getenv("DEBUG_TIME_WINDOW")),
        )

    def validate_settings(self) -> None:
        """Validate settings needed to run the bot.

        Raises:
            ConfigError: If a required setting is missing
        """
        if not self.slack_bot_token:
            raise ConfigError("SLACK_BOT_TOKEN is required")
        if not self.projects:
            raise ConfigError("At least one project must be configured")
        self.validate_debug()

    def validate_debug(self) -> None:
        """Validate settings needed by the debug feature when it is enabled."""
        if not self.debug_enabled:
            return
        if not self.gcp_project_id:
            raise ConfigError("GCP_PROJECT_ID is required when DEBUG_ENABLED=true")
        if not self.vertex_location:
            raise ConfigError("VERTEX_LOCATION is required when DEBUG_ENABLED=true")

    @property
    def lookback(self) -> timedelta:
        """Debug lookback window."""
        return timedelta(minutes=self.debug_time_window)

    @property
    def uses_vertex(self) -> bool:
        """True when MODEL_NAME is a bare Gemini model name served by Vertex AI.

        A ``provider:model`` value is handed to PydanticAI as-is.
        """
        return ":" not in self.model_name

    @property
    def channel_to_projects(self) -> dict[str, list[str]]:
        """Map each configured channel to the project ids that post to it."""
        mapping: dict[str, list[str]] = {}
        for project in self.projects:
            channels = [project.default_channel, *project.service_channels.values()]
            for channel in channels:
                if not channel:
                    continue
                project_ids = mapping.setdefault(channel, [])
                if project.id not in project_ids:
                    project_ids.append(project.id)
        return mapping

    def projects_for_channel(self, channel: str) -> list[str]:
        """Return the project ids associated with a channel."""
        return self.channel_to_projects.get(channel, [])

    def project_config(self, project_id: str) -> ProjectConfig | None:
        """Return the configuration of a project, if configured."""
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    def channel_for_service(self, project_id: str, service_name: str) -> str:
        """Return the Slack channel for a service or job.

        Falls back from the service-specific channel to the project default
        channel and then to the global default channel.
        """
        project = self.project_config(project_id)
        if project is not None:
            if service_name in project.service_channels:
                return project.service_channels[service_name]
            if project.default_channel:
                return project.default_channel
        return self.default_channel

    def summary_lines(self) -> list[str]:
        """Describe the configuration without secrets."""
        lines = [
            f"Default Channel: {self.default_channel or '-'}",
            "Projects:",
        ]
        for project in self.projects:
            lines.append(
                f"  - ID: {project.id}, Region: {project.region}, "
                f"Default Channel: {project.default_channel or '-'}"
            )
            if project.service_channels:
                lines.append(f"    Service Channels: {project.service_channels}")
        lines.append("Channel-to-Project Mapping:")
        for channel, project_ids in self.channel_to_projects.items():
            if len(project_ids) == 1:
                lines.append(
                    f"  - Channel '{channel}' -> Project '{project_ids[0]}' "
                    "(auto-detect enabled)"
                )
            else:
                lines.append(
                    f"  - Channel '{channel}' -> Projects {project_ids} "
                    "(manual selection required)"
                )
        lines.append(f"Debug Enabled: {self.debug_enabled}")
        if self.debug_enabled:
            lines.extend(
                [
                    f"  GCP Project ID: {self.gcp_project_id}",
                    f"  Vertex Location: {self.vertex_location}",
                    f"  Model: {self.model_name}",
                    f"  Time Window: {self.debug_time_window} minutes",
                ]
            )
        return lines
