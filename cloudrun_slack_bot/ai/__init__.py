"""AI agents for grouping and analyzing error logs."""

from .agents import (
    DEFAULT_MODEL,
    create_analysis_agent,
    create_grouping_agent,
    create_vertex_model,
)
from .analysis import (
    MAX_ERRORS_FOR_GROUPING,
    analyze_errors,
    build_groups,
    format_analysis_prompt,
    format_grouping_prompt,
    group_errors,
)
from .models import AnalysisResponse, ErrorGroupAssignment, GroupingResponse

__all__ = [
    # Models
    "AnalysisResponse",
    "ErrorGroupAssignment",
    "GroupingResponse",
    # Agents
    "DEFAULT_MODEL",
    "create_analysis_agent",
    "create_grouping_agent",
    "create_vertex_model",
    # Analysis functions
    "MAX_ERRORS_FOR_GROUPING",
    "analyze_errors",
    "build_groups",
    "format_analysis_prompt",
    "format_grouping_prompt",
    "group_errors",
]
