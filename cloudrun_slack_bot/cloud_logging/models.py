"""Pydantic models for Cloud Logging entries."""

from pydantic import AwareDatetime, BaseModel, Field


class LogEntry(BaseModel):
    """Simplified Cloud Logging entry.

    Maps the fields of the Cloud Logging LogEntry that the debug workflow uses.
    API Reference: https://cloud.google.com/logging/docs/reference/v2/rest/v2/LogEntry
    """

    timestamp: AwareDatetime = Field(..., description="Time the event was logged")
    severity: str = Field("DEFAULT", description="Log severity, e.g. ERROR")
    message: str = Field("", description="Message extracted from the payload")
    trace_id: str = Field("", description="Trace id without the project prefix")
    span_id: str = Field("", description="Span id within the trace")
    labels: dict[str, str] = Field(default_factory=dict)
    resource_type: str = Field("", description="Monitored resource type")
    resource_labels: dict[str, str] = Field(default_factory=dict)
