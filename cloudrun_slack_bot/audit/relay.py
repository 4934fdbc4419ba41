"""Relay Cloud Run audit log events to Slack channels."""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from ..config import BotConfig
from ..errors import AuditLogError
from ..slack.client import SlackClient
from .models import CloudRunAuditLog, PubSubMessage, TrafficTarget

logger = logging.getLogger(__name__)

# Slack attachment colors: good, warning, danger or a hex code
SEVERITY_COLORS = {
    "NOTICE": "good",
    "INFO": "good",
    "ERROR": "danger",
}
DEFAULT_COLOR = "#D3D3D3"

READY_EMOJI = {True: "✅", False: "👀"}


class AuditEvent(BaseModel):
    """An audit log entry routed to a Slack channel."""

    project_id: str
    resource_type: str
    resource_name: str
    channel: str
    attachment: Dict[str, Any]


def get_color(severity: str) -> str:
    """Return the attachment color for a log severity."""
    return SEVERITY_COLORS.get(severity, DEFAULT_COLOR)


def parse_push_message(body: bytes | str) -> CloudRunAuditLog:
    """Decode a Pub/Sub push request body into an audit log entry.

    Raises:
        AuditLogError: If the body or the embedded log entry is malformed
    """
    try:
        message = PubSubMessage.model_validate_json(body)
    except ValidationError as e:
        raise AuditLogError(f"Failed to parse Pub/Sub message: {e}") from e

    logger.debug("Cloud Run audit log message data: %s", message.message.data)
    try:
        return CloudRunAuditLog.model_validate_json(message.message.data)
    except ValidationError as e:
        raise AuditLogError(f"Failed to parse audit log entry: {e}") from e


def format_traffic(target: TrafficTarget) -> str:
    """Format one traffic split entry, e.g. ``- `rev-00001` (100%) [prod] ✅``."""
    line = f"- `{target.revision_name}` ({target.percent}%)"
    if target.tag:
        line += f" [{target.tag}]"
    if target.latest_revision:
        line += f" {READY_EMOJI[True]}"
    return line


def _field(title: str, value: str, short: bool = False) -> Dict[str, Any]:
    return {"title": title, "value": value, "short": short}


def build_attachment(
    log: CloudRunAuditLog, project_id: str, resource_type: str, name: str
) -> Dict[str, Any]:
    """Build the Slack attachment describing one audit log entry."""
    payload = log.proto_payload
    status = payload.response.status
    metadata = payload.response.metadata

    fields: List[Dict[str, Any]] = [
        _field("Project", project_id, short=True),
        _field(resource_type, name, short=True),
    ]
    if payload.resource_name:
        short_name = payload.resource_name.split("/")[-1]
        # Revision or execution names differ from the service or job name
        if short_name != name:
            fields.append(_field("ResourceName", short_name, short=True))
    if payload.method_name:
        fields.append(_field("Method", payload.method_name, short=True))

    if resource_type == "job":
        if status.latest_created_execution_name:
            fields.append(
                _field(
                    "Latest Created Execution",
                    f"`{status.latest_created_execution_name}`",
                    short=True,
                )
            )
        conditions = [
            f"- `{c.type}`: {c.status} ({c.reason})" for c in status.conditions
        ]
        if conditions:
            fields.append(_field("Conditions", "\n".join(conditions)))
    else:
        if status.latest_created_revision_name:
            ready = (
                status.latest_ready_revision_name
                == status.latest_created_revision_name
            )
            fields.append(
                _field(
                    "Latest Created Revision",
                    f"`{status.latest_created_revision_name}` ({READY_EMOJI[ready]})",
                    short=True,
                )
            )
        revisions = [format_traffic(target) for target in status.traffic]
        if revisions:
            fields.append(_field("Traffic Revisions", "\n".join(revisions)))

    if log.severity == "ERROR":
        fields.append(
            _field(
                "Error",
                f"Code: {payload.status.code}\nMessage: {payload.status.message}",
            )
        )
    fields.append(_field("Severity", log.severity, short=True))

    last_modifier = metadata.annotations.last_modifier
    if payload.status.message:
        text = payload.status.message
    elif last_modifier:
        text = (
            f"Cloud Run {resource_type} `{name}` in project `{project_id}` "
            f"has been modified by `{last_modifier}` "
            f"(generation: {metadata.generation})."
        )
    else:
        text = (
            f"Cloud Run {resource_type} `{name}` in project `{project_id}` "
            f"has been updated (generation: {metadata.generation})."
        )

    return {"color": get_color(log.severity), "text": text, "fields": fields}


class AuditLogRelay:
    """Routes Cloud Run audit log entries to the Slack channel of each service."""

    def __init__(self, config: BotConfig, slack: SlackClient) -> None:
        self.config = config
        self.slack = slack

    def route(self, log: CloudRunAuditLog) -> Optional[AuditEvent]:
        """Resolve the channel and message for an entry.

        Returns:
            The routed event, or None when the entry has no project, no
            service or job name, or no channel is configured for it
        """
        project_id = log.project_id
        if not project_id:
            logger.warning("No project_id found in the audit log entry")
            return None

        resource_type, name = log.target()
        if not name:
            logger.warning("No job or service name found in the audit log entry")
            return None

        logger.info(
            "Method Name: %s, Project: %s, Resource Name: %s, Resource Type: %s",
            log.proto_payload.method_name,
            project_id,
            name,
            resource_type,
        )

        channel = self.config.channel_for_service(project_id, name)
        if not channel:
            logger.warning(
                "No channel found for '%s'(%s) in project %s",
                name,
                resource_type,
                project_id,
            )
            return None

        return AuditEvent(
            project_id=project_id,
            resource_type=resource_type,
            resource_name=name,
            channel=channel,
            attachment=build_attachment(log, project_id, resource_type, name),
        )

    def relay(self, log: CloudRunAuditLog) -> Optional[AuditEvent]:
        """Post an audit log entry to its channel.

        Returns:
            The posted event, or None when the entry was not routable

        Raises:
            AuditLogError: If Slack rejects the message
        """
        event = self.route(log)
        if event is None:
            return None

        logger.info(
            "Relaying %s '%s' audit event to %s",
            event.resource_type,
            event.resource_name,
            event.channel,
        )
        posted = self.slack.post_attachment(
            event.channel,
            event.attachment,
            text=f"Cloud Run {event.resource_type} {event.resource_name} updated",
        )
        if not posted:
            raise AuditLogError(f"Failed to post audit event to {event.channel}")
        return event
