"""Configuration for Slack integration."""

import os
from typing import Optional

from ..errors import ConfigError


class SlackConfig:
    """Configuration class for Slack API integration."""

    def __init__(
        self,
        bot_token: Optional[str] = None,
        default_channel: Optional[str] = None,
    ) -> None:
        """Initialize Slack configuration, falling back to environment variables."""
        self.bot_token: Optional[str] = bot_token or os.getenv("SLACK_BOT_TOKEN")
        self.default_channel: str = default_channel or os.getenv("SLACK_CHANNEL", "")

    def is_configured(self) -> bool:
        """Check if Slack is properly configured."""
        return bool(self.bot_token)

    def validate(self) -> None:
        """Validate configuration and raise error if invalid."""
        if not self.bot_token:
            raise ConfigError(
                "Environment variable required for Slack notifications: "
                "SLACK_BOT_TOKEN"
            )
