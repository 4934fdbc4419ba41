"""Cloud Logging client for reading Cloud Run error and trace logs."""

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import logging as gcp_logging

from ..errors import LogSourceError
from .models import LogEntry

logger = logging.getLogger(__name__)

# Maximum entries read per query
MAX_ENTRIES = 100

RESOURCE_FILTERS = {
    "service": ("cloud_run_revision", "service_name"),
    "job": ("cloud_run_job", "job_name"),
}


class LogSource(Protocol):
    """Source of log entries consumed by the debug workflow."""

    def get_error_logs(
        self, resource_type: str, resource_name: str, lookback: timedelta
    ) -> list[LogEntry]: ...

    def get_logs_by_trace_id(self, trace_id: str) -> list[LogEntry]: ...


def extract_message(payload: Any) -> str:
    """Extract a human-readable message from a log entry payload."""
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload
    if isinstance(payload, Mapping):
        for key in ("message", "textPayload"):
            value = payload.get(key)
            if isinstance(value, str):
                return value
        # JSON reads better than a Python repr for the analysis agent
        try:
            return json.dumps(dict(payload), default=str)
        except (TypeError, ValueError):
            return str(payload)
    return str(payload)


def extract_trace_id(trace: str | None) -> str:
    """Extract the trace id from ``projects/{project}/traces/{trace_id}``."""
    if not trace:
        return ""
    parts = trace.split("/")
    if len(parts) >= 4:
        return parts[-1]
    return ""


def build_error_filter(
    resource_type: str, resource_name: str, start_time: datetime
) -> str:
    """Build the Cloud Logging filter for errors of a service or job.

    Raises:
        ValueError: If resource_type is not 'service' or 'job'
    """
    if resource_type not in RESOURCE_FILTERS:
        raise ValueError(f"Unsupported resource type: {resource_type}")
    monitored_type, name_label = RESOURCE_FILTERS[resource_type]
    timestamp = start_time.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return (
        f'resource.type = "{monitored_type}" '
        f'AND resource.labels.{name_label} = "{resource_name}" '
        f"AND severity >= ERROR "
        f'AND timestamp >= "{timestamp}"'
    )


class LoggingClient:
    """Reads Cloud Run log entries from Cloud Logging for one project."""

    def __init__(self, project: str, client: gcp_logging.Client | None = None):
        """Initialize the logging client.

        Args:
            project: GCP project id whose logs are read
            client: Optional pre-built google-cloud-logging client
        """
        self.project = project
        self._client = client

    @property
    def client(self) -> gcp_logging.Client:
        """Get or create the underlying Cloud Logging client."""
        if self._client is None:
            self._client = gcp_logging.Client(project=self.project)
            logger.info("Logging client created for project %s", self.project)
        return self._client

    def get_error_logs(
        self, resource_type: str, resource_name: str, lookback: timedelta
    ) -> list[LogEntry]:
        """Get error logs for a Cloud Run service or job within the lookback."""
        start_time = datetime.now(timezone.utc) - lookback
        filter_ = build_error_filter(resource_type, resource_name, start_time)
        logger.info("Getting error logs for %s: %s", self.project, filter_)
        return self._query(filter_)

    def get_logs_by_trace_id(self, trace_id: str) -> list[LogEntry]:
        """Get all logs recorded for one trace."""
        filter_ = f'trace = "projects/{self.project}/traces/{trace_id}"'
        logger.info("Getting logs for trace %s in %s", trace_id, self.project)
        return self._query(filter_)

    def _query(self, filter_: str) -> list[LogEntry]:
        try:
            entries = [
                self._convert_entry(entry)
                for entry in self.client.list_entries(
                    resource_names=[f"projects/{self.project}"],
                    filter_=filter_,
                    order_by=gcp_logging.DESCENDING,
                    max_results=MAX_ENTRIES,
                )
            ]
        except (GoogleAPIError, GoogleAuthError) as e:
            raise LogSourceError(
                f"Failed to read log entries for project {self.project}: {e}"
            ) from e

        logger.info("Retrieved %d log entries from %s", len(entries), self.project)
        return entries

    def _convert_entry(self, entry: Any) -> LogEntry:
        """Convert a google-cloud-logging entry to our model."""
        resource = getattr(entry, "resource", None)
        resource_labels = (
            dict(resource.labels or {}) if resource is not None else {}
        )
        timestamp = entry.timestamp or datetime.now(timezone.utc)
        if timestamp.tzinfo is None:
            # Cloud Logging timestamps are UTC
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return LogEntry(
            timestamp=timestamp,
            severity=entry.severity or "DEFAULT",
            message=extract_message(entry.payload),
            trace_id=extract_trace_id(entry.trace),
            span_id=entry.span_id or "",
            labels=dict(entry.labels or {}),
            resource_type=resource.type if resource is not None else "",
            resource_labels=resource_labels,
        )
