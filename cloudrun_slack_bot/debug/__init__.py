"""Debug workflow: error grouping, trace-based merging and analysis."""

from .merge import UnionFind, has_trace_overlap, merge_groups_by_trace
from .models import (
    DebugResult,
    ErrorAnalysis,
    ErrorGroup,
    ErrorGroupResult,
    ErrorLog,
)

__all__ = [
    "DebugResult",
    "ErrorAnalysis",
    "ErrorGroup",
    "ErrorGroupResult",
    "ErrorLog",
    "UnionFind",
    "has_trace_overlap",
    "merge_groups_by_trace",
]
