"""Relay of Cloud Run audit log events to Slack."""

from .models import CloudRunAuditLog, PubSubMessage
from .relay import AuditEvent, AuditLogRelay, build_attachment, parse_push_message

__all__ = [
    "AuditEvent",
    "AuditLogRelay",
    "CloudRunAuditLog",
    "PubSubMessage",
    "build_attachment",
    "parse_push_message",
]
