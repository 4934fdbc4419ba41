"""Slack client for posting Cloud Run debug results."""

import logging
from typing import Any, Dict, List, Optional

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from ..debug.models import DebugResult, ErrorGroupResult
from .config import SlackConfig

logger = logging.getLogger(__name__)

MAX_GROUPS = 5
MAX_ITEMS = 4
MAX_MESSAGE_LENGTH = 500


def _truncate(text: str, limit: int = MAX_MESSAGE_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def _bullets(items: List[str], limit: int = MAX_ITEMS) -> str:
    text = "\n".join([f"• {item}" for item in items[:limit]])
    if len(items) > limit:
        text += f"\n• ... and {len(items) - limit} more"
    return text


class SlackClient:
    """Client for sending debug analysis results to Slack."""

    def __init__(self, config: Optional[SlackConfig] = None) -> None:
        """Initialize Slack client with configuration."""
        self.config = config or SlackConfig()
        self._bot_client: Optional[WebClient] = None

    @property
    def bot_client(self) -> WebClient:
        """Get or create Slack WebClient instance for the bot token."""
        if self._bot_client is None:
            self.config.validate()
            self._bot_client = WebClient(token=self.config.bot_token)
        return self._bot_client

    def post_debug_result(self, channel: str, result: DebugResult) -> bool:
        """
        Post a debug result to a channel.

        Args:
            channel: Slack channel to post to
            result: The debug analysis result

        Returns:
            True if successful, False otherwise
        """
        if not self.config.is_configured():
            logger.warning("Slack is not configured, skipping debug result")
            return False

        try:
            response = self.bot_client.chat_postMessage(
                channel=channel or self.config.default_channel,
                blocks=self.format_debug_result(result),
                text=(
                    f"Debug analysis for {result.resource_type} "
                    f"{result.resource_name}"
                ),
            )
            return bool(response["ok"])
        except SlackApiError as e:
            logger.error(f"Error posting debug result to Slack: {e}")

        return False

    def post_analysis_failed(
        self, channel: str, resource_type: str, resource_name: str, reason: str
    ) -> bool:
        """Tell a channel that debug analysis failed for a resource."""
        if not self.config.is_configured():
            logger.warning("Slack is not configured, skipping failure notice")
            return False

        try:
            response = self.bot_client.chat_postMessage(
                channel=channel or self.config.default_channel,
                text=(
                    f"❌ Debug analysis failed for {resource_type} "
                    f"`{resource_name}`: {reason}"
                ),
            )
            return bool(response["ok"])
        except SlackApiError as e:
            logger.error(f"Error posting failure notice to Slack: {e}")

        return False

    def post_attachment(
        self, channel: str, attachment: Dict[str, Any], text: str = ""
    ) -> bool:
        """Post a single colored attachment, e.g. an audit log event."""
        if not self.config.is_configured():
            logger.warning("Slack is not configured, skipping attachment")
            return False

        try:
            response = self.bot_client.chat_postMessage(
                channel=channel or self.config.default_channel,
                attachments=[attachment],
                text=text,
            )
            return bool(response["ok"])
        except SlackApiError as e:
            logger.error(f"Error posting attachment to Slack: {e}")

        return False

    def format_debug_result(self, result: DebugResult) -> List[Dict[str, Any]]:
        """
        Format a debug result into Slack Block Kit format.

        Args:
            result: The debug analysis result

        Returns:
            List of Slack Block Kit blocks
        """
        blocks: List[Dict[str, Any]] = []

        blocks.append(
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": (
                        f"🔍 *Debug Analysis* - {result.resource_type} "
                        f"`{result.resource_name}`"
                    ),
                },
            }
        )
        blocks.append(
            {
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": f"*Project:* {result.project_id}"},
                    {
                        "type": "mrkdwn",
                        "text": f"*Lookback:* {result.lookback_minutes} minutes",
                    },
                    {"type": "mrkdwn", "text": f"*Errors:* {result.total_errors}"},
                    {
                        "type": "mrkdwn",
                        "text": f"*Groups:* {len(result.error_groups)}",
                    },
                ],
            }
        )

        if result.total_errors == 0:
            blocks.append(
                {
                    "type": "section",
                    "text": {
                        "type": "mrkdwn",
                        "text": (
                            "✅ No errors found in the last "
                            f"{result.lookback_minutes} minutes."
                        ),
                    },
                }
            )

        for group in result.error_groups[:MAX_GROUPS]:
            blocks.append({"type": "divider"})
            blocks.append(self._format_group(group))

        if len(result.error_groups) > MAX_GROUPS:
            blocks.append(
                {
                    "type": "context",
                    "elements": [
                        {
                            "type": "mrkdwn",
                            "text": (
                                f"... and {len(result.error_groups) - MAX_GROUPS} "
                                "more groups"
                            ),
                        }
                    ],
                }
            )

        timestamp = result.generated_at.strftime("%Y-%m-%d %H:%M:%S UTC")
        blocks.append(
            {
                "type": "context",
                "elements": [
                    {"type": "mrkdwn", "text": f"Analysis generated at {timestamp}"}
                ],
            }
        )

        return blocks

    def _format_group(self, group: ErrorGroupResult) -> Dict[str, Any]:
        """Format one error group as a section block."""
        status_emoji = "🚨" if group.analysis.analyzed else "⚠️"
        lines = [
            f"{status_emoji} *{group.pattern}* ({group.error_count} errors)",
            f"```{_truncate(group.representative)}```",
        ]
        if group.trace_id:
            lines.append(f"*Trace:* `{group.trace_id}`")
        lines.append(f"*Summary:* {group.analysis.summary}")
        if group.analysis.possible_causes:
            lines.append(
                f"*Possible Causes:*\n{_bullets(group.analysis.possible_causes)}"
            )
        if group.analysis.suggestions:
            lines.append(f"*Suggestions:*\n{_bullets(group.analysis.suggestions)}")

        return {
            "type": "section",
            "text": {"type": "mrkdwn", "text": "\n".join(lines)},
        }
