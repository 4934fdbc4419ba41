"""Pydantic models for Cloud Run audit log events delivered by Pub/Sub."""

from pydantic import AliasChoices, Base64Bytes, BaseModel, ConfigDict, Field


class AuditModel(BaseModel):
    """Base for audit log payload models: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(populate_by_name=True)


class PubSubData(AuditModel):
    """The ``message`` object of a Pub/Sub push request."""

    data: Base64Bytes = Field(description="Base64-encoded LogEntry JSON")
    message_id: str = Field(
        default="", validation_alias=AliasChoices("messageId", "message_id", "id")
    )


class PubSubMessage(AuditModel):
    """Pub/Sub push request body.

    API Reference: https://cloud.google.com/pubsub/docs/reference/rest/v1/PubsubMessage
    """

    message: PubSubData
    subscription: str = ""


class MonitoredResource(AuditModel):
    type: str = ""
    labels: dict[str, str] = Field(default_factory=dict)


class OperationStatus(AuditModel):
    code: int = 0
    message: str = ""


class TrafficTarget(AuditModel):
    """One traffic split entry of a Cloud Run service."""

    revision_name: str = Field(default="", alias="revisionName")
    percent: int = 0
    latest_revision: bool = Field(default=False, alias="latestRevision")
    tag: str = ""


class Condition(AuditModel):
    type: str = ""
    status: str = ""
    reason: str = ""
    message: str = ""


class ResourceStatus(AuditModel):
    """Status of the service or job returned by the admin API call."""

    # Services
    latest_created_revision_name: str = Field(
        default="", alias="latestCreatedRevisionName"
    )
    latest_ready_revision_name: str = Field(
        default="", alias="latestReadyRevisionName"
    )
    traffic: list[TrafficTarget] = Field(default_factory=list)
    # Jobs
    latest_created_execution_name: str = Field(
        default="", alias="latestCreatedExecutionName"
    )
    conditions: list[Condition] = Field(default_factory=list)


class Annotations(AuditModel):
    last_modifier: str = Field(default="", alias="serving.knative.dev/lastModifier")


class ResourceMetadata(AuditModel):
    generation: int = 0
    annotations: Annotations = Field(default_factory=Annotations)


class AuditResponse(AuditModel):
    status: ResourceStatus = Field(default_factory=ResourceStatus)
    metadata: ResourceMetadata = Field(default_factory=ResourceMetadata)


class ProtoPayload(AuditModel):
    status: OperationStatus = Field(default_factory=OperationStatus)
    resource_name: str = Field(default="", alias="resourceName")
    method_name: str = Field(default="", alias="methodName")
    response: AuditResponse = Field(default_factory=AuditResponse)


class CloudRunAuditLog(AuditModel):
    """Cloud Run admin activity audit log entry.

    API Reference: https://cloud.google.com/logging/docs/reference/v2/rest/v2/LogEntry
    """

    resource: MonitoredResource = Field(default_factory=MonitoredResource)
    severity: str = ""
    log_name: str = Field(default="", alias="logName")
    proto_payload: ProtoPayload = Field(
        default_factory=ProtoPayload, alias="protoPayload"
    )

    @property
    def project_id(self) -> str:
        return self.resource.labels.get("project_id", "")

    def target(self) -> tuple[str, str]:
        """Return ``(resource_type, name)`` of the job or service, if any.

        Jobs take precedence over services; both are empty when the entry
        carries neither label.
        """
        labels = self.resource.labels
        if labels.get("job_name"):
            return "job", labels["job_name"]
        if labels.get("service_name"):
            return "service", labels["service_name"]
        return "", ""
