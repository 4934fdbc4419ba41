"""Debug workflow orchestration for Cloud Run error analysis."""

import asyncio
import logging
from datetime import timedelta
from typing import Any

from pydantic_ai import Agent

from ..ai.analysis import analyze_errors, group_errors
from ..ai.models import AnalysisResponse, GroupingResponse
from ..cloud_logging.client import LogSource
from ..cloud_logging.models import LogEntry
from ..errors import BotError, DebugError, GroupingError, LogSourceError
from .merge import merge_groups_by_trace
from .models import (
    DebugResult,
    ErrorAnalysis,
    ErrorGroup,
    ErrorGroupResult,
    ErrorLog,
)

logger = logging.getLogger(__name__)


def format_trace_log(entry: LogEntry) -> str:
    """Format a trace log entry as ``[{timestamp}] {severity}: {message}``."""
    return f"[{entry.timestamp.isoformat()}] {entry.severity}: {entry.message}"


def placeholder_analysis(pattern: str) -> ErrorAnalysis:
    """Analysis used when the analysis agent fails for one group."""
    return ErrorAnalysis(
        summary=f"Analysis unavailable for: {pattern}",
        possible_causes=["Analysis failed"],
        suggestions=["Review logs manually"],
        analyzed=False,
    )


class Debugger:
    """Runs the debug workflow: fetch, group, merge and analyze errors."""

    def __init__(
        self,
        log_sources: dict[str, LogSource],
        grouping_agent: Agent[None, GroupingResponse],
        analysis_agent: Agent[None, AnalysisResponse],
        lookback: timedelta = timedelta(minutes=30),
        model_settings: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the debugger.

        Args:
            log_sources: Log source per GCP project id
            grouping_agent: Agent used to group error logs
            analysis_agent: Agent used to analyze each merged group
            lookback: How far back to look for errors
            model_settings: Optional model settings passed to both agents
        """
        self.log_sources = log_sources
        self.grouping_agent = grouping_agent
        self.analysis_agent = analysis_agent
        self.lookback = lookback
        self.model_settings = model_settings

    async def debug_resource(
        self, project_id: str, resource_type: str, resource_name: str
    ) -> DebugResult:
        """Perform debug analysis on a Cloud Run service or job.

        Raises:
            DebugError: If logs cannot be retrieved or errors cannot be grouped
        """
        log_source = self.log_sources.get(project_id)
        if log_source is None:
            raise DebugError(f"No logging client found for project {project_id}")

        logger.info(
            "Starting debug analysis for %s %s in project %s (lookback: %s)",
            resource_type,
            resource_name,
            project_id,
            self.lookback,
        )

        try:
            entries = await asyncio.to_thread(
                log_source.get_error_logs, resource_type, resource_name, self.lookback
            )
        except (LogSourceError, ValueError) as e:
            raise DebugError(f"Failed to get error logs: {e}") from e

        result = DebugResult(
            resource_name=resource_name,
            resource_type=resource_type,
            project_id=project_id,
            total_errors=len(entries),
            lookback_minutes=int(self.lookback.total_seconds() // 60),
        )
        if not entries:
            logger.info("No errors found for %s %s", resource_type, resource_name)
            return result

        errors = [
            ErrorLog(
                message=entry.message,
                timestamp=entry.timestamp,
                trace_id=entry.trace_id,
            )
            for entry in entries
        ]

        try:
            groups = await group_errors(
                self.grouping_agent, errors, self.model_settings
            )
        except GroupingError as e:
            raise DebugError(f"Failed to group errors: {e}") from e

        merged = merge_groups_by_trace(groups)
        result.error_groups = list(
            await asyncio.gather(
                *(self._analyze_group(log_source, group) for group in merged)
            )
        )

        logger.info(
            "Debug analysis complete: %d errors in %d groups",
            result.total_errors,
            len(result.error_groups),
        )
        return result

    async def _analyze_group(
        self, log_source: LogSource, group: ErrorGroup
    ) -> ErrorGroupResult:
        """Analyze one merged group, degrading to a placeholder on failure."""
        trace_id = group.representative.trace_id
        trace_logs = await self._get_trace_logs(log_source, trace_id)

        try:
            analysis = await analyze_errors(
                self.analysis_agent, group, trace_logs, self.model_settings
            )
        except BotError as e:
            logger.warning("Failed to analyze error group %s: %s", group.pattern, e)
            analysis = placeholder_analysis(group.pattern)

        return ErrorGroupResult(
            pattern=group.pattern,
            error_count=group.count,
            representative=group.representative.message,
            trace_id=trace_id,
            analysis=analysis,
        )

    async def _get_trace_logs(self, log_source: LogSource, trace_id: str) -> list[str]:
        if not trace_id:
            return []
        try:
            entries = await asyncio.to_thread(
                log_source.get_logs_by_trace_id, trace_id
            )
        except LogSourceError as e:
            logger.warning("Failed to get trace logs for %s: %s", trace_id, e)
            return []
        return [format_trace_log(entry) for entry in entries]
