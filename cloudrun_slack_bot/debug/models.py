"""Pydantic models for the debug workflow."""

from datetime import datetime, timezone

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class ErrorLog(BaseModel):
    """A single error log line collected for grouping."""

    model_config = ConfigDict(frozen=True)

    message: str = Field(description="Log message text")
    timestamp: AwareDatetime = Field(description="When the entry was logged")
    trace_id: str = Field(
        default="", description="Trace identifier, empty if the entry had none"
    )


class ErrorGroup(BaseModel):
    """A cluster of error logs believed to share a common root cause."""

    pattern: str = Field(description="Short label describing the error pattern")
    representative: ErrorLog = Field(description="Exemplar error for this group")
    similar_errors: list[ErrorLog] = Field(
        default_factory=list, description="Other errors in this group"
    )
    count: int = Field(description="Total number of errors in this group")

    def errors(self) -> list[ErrorLog]:
        """Return the representative followed by the similar errors."""
        return [self.representative, *self.similar_errors]

    def trace_ids(self) -> set[str]:
        """Return the set of non-empty trace ids contributed by this group."""
        return {error.trace_id for error in self.errors() if error.trace_id}


class ErrorAnalysis(BaseModel):
    """Analysis of one error group."""

    summary: str = Field(description="Brief summary of the error group")
    possible_causes: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    analyzed: bool = Field(
        default=True, description="False when this is a placeholder analysis"
    )


class ErrorGroupResult(BaseModel):
    """Analysis result for one merged error group."""

    pattern: str
    error_count: int
    representative: str = Field(description="Representative error message")
    trace_id: str = Field(default="", description="Representative trace id")
    analysis: ErrorAnalysis


class DebugResult(BaseModel):
    """Complete debug analysis of a Cloud Run service or job."""

    resource_name: str
    resource_type: str = Field(description="'service' or 'job'")
    project_id: str
    total_errors: int = 0
    error_groups: list[ErrorGroupResult] = Field(default_factory=list)
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    lookback_minutes: int = 0
