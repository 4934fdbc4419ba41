"""Pydantic models for AI agent responses."""

from pydantic import BaseModel, ConfigDict, Field


class ErrorGroupAssignment(BaseModel):
    """One group of error messages as assigned by the grouping agent."""

    model_config = ConfigDict(extra="forbid")

    pattern: str = Field(description="A brief description of the error pattern")
    indices: list[int] = Field(
        description="1-based indices of errors belonging to this group"
    )


class GroupingResponse(BaseModel):
    """Structured response for error grouping."""

    model_config = ConfigDict(extra="forbid")

    groups: list[ErrorGroupAssignment] = Field(
        description="Error groups, each covering messages with the same root cause"
    )


class AnalysisResponse(BaseModel):
    """Structured response for the analysis of one error group."""

    model_config = ConfigDict(extra="forbid")

    summary: str = Field(
        description="Brief summary of what's happening (1-2 sentences)"
    )
    possible_causes: list[str] = Field(description="2-4 possible root causes")
    suggestions: list[str] = Field(
        description="2-4 actionable suggestions to fix or investigate"
    )
