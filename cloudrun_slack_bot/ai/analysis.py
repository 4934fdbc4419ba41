"""Error grouping and per-group analysis using PydanticAI agents."""

import logging
from typing import Any

from pydantic_ai import Agent
from pydantic_ai.exceptions import UnexpectedModelBehavior

from ..debug.models import ErrorAnalysis, ErrorGroup, ErrorLog
from ..errors import AnalysisError, GroupingError
from .models import AnalysisResponse, ErrorGroupAssignment, GroupingResponse

logger = logging.getLogger(__name__)

# Limit errors sent for grouping to keep the prompt within the context window
MAX_ERRORS_FOR_GROUPING = 100

UNGROUPED_PATTERN = "Ungrouped errors"


def format_grouping_prompt(errors: list[ErrorLog]) -> str:
    """Format error logs into a numbered list for the grouping agent.

    Args:
        errors: Error logs to group

    Returns:
        Prompt with one ``"{i}. [{timestamp}] {message}"`` line per error
    """
    lines = [
        f"{i}. [{error.timestamp.isoformat()}] {error.message}"
        for i, error in enumerate(errors, start=1)
    ]
    error_messages = "\n".join(lines)
    return f"""
**ERROR MESSAGES:**

{error_messages}

**TASK:** Group these {len(errors)} error messages by similarity.
"""


def format_analysis_prompt(
    group: ErrorGroup, trace_logs: list[str] | None = None
) -> str:
    """Format an error group and its trace context for the analysis agent.

    Args:
        group: Error group to analyze
        trace_logs: Optional log lines from the representative's trace

    Returns:
        Formatted prompt string
    """
    trace_context = ""
    if trace_logs:
        joined = "\n".join(trace_logs)
        trace_context = f"\n\n**Trace Context (related logs):**\n{joined}"

    return f"""
**Error Pattern:** {group.pattern}

**Error Count:** {group.count}

**Representative Error:** {group.representative.message}
{trace_context}

**TASK:** Analyze this error group and provide actionable insights.
"""


def build_groups(
    assignments: list[ErrorGroupAssignment], errors: list[ErrorLog]
) -> list[ErrorGroup]:
    """Convert index assignments from the grouping agent into error groups.

    Out-of-range indices are ignored. The first valid index of each group is
    its representative; groups without any valid index are dropped.
    """
    groups: list[ErrorGroup] = []
    for assignment in assignments:
        members = [
            errors[idx - 1] for idx in assignment.indices if 1 <= idx <= len(errors)
        ]
        if not members:
            continue
        representative, *similar = members
        groups.append(
            ErrorGroup(
                pattern=assignment.pattern,
                representative=representative,
                similar_errors=similar,
                count=len(members),
            )
        )
    return groups


async def group_errors(
    agent: Agent[None, GroupingResponse],
    errors: list[ErrorLog],
    model_settings: dict[str, Any] | None = None,
) -> list[ErrorGroup]:
    """Group similar error logs using the grouping agent.

    Args:
        agent: PydanticAI grouping agent
        errors: Error logs to group
        model_settings: Optional model settings override

    Returns:
        Initial, unmerged error groups

    Raises:
        GroupingError: If the agent call fails
    """
    if not errors:
        return []

    errors_to_process = errors
    if len(errors) > MAX_ERRORS_FOR_GROUPING:
        logger.warning(
            "Truncating errors for grouping from %d to %d",
            len(errors),
            MAX_ERRORS_FOR_GROUPING,
        )
        errors_to_process = errors[:MAX_ERRORS_FOR_GROUPING]

    kwargs: dict[str, Any] = {}
    if model_settings:
        kwargs["model_settings"] = model_settings

    try:
        result = await agent.run(format_grouping_prompt(errors_to_process), **kwargs)
    except UnexpectedModelBehavior as e:
        logger.error("Failed to parse grouping response: %s", e)
        # Treat everything as one group rather than losing the errors
        return [
            ErrorGroup(
                pattern=UNGROUPED_PATTERN,
                representative=errors_to_process[0],
                similar_errors=errors_to_process[1:],
                count=len(errors_to_process),
            )
        ]
    except Exception as e:
        raise GroupingError(f"Failed to run LLM for grouping: {e}") from e

    groups = build_groups(result.output.groups, errors_to_process)
    logger.info(
        "Grouped %d errors into %d groups", len(errors_to_process), len(groups)
    )
    return groups


async def analyze_errors(
    agent: Agent[None, AnalysisResponse],
    group: ErrorGroup,
    trace_logs: list[str] | None = None,
    model_settings: dict[str, Any] | None = None,
) -> ErrorAnalysis:
    """Analyze one error group using the analysis agent.

    Raises:
        AnalysisError: If the agent call fails
    """
    kwargs: dict[str, Any] = {}
    if model_settings:
        kwargs["model_settings"] = model_settings

    try:
        result = await agent.run(format_analysis_prompt(group, trace_logs), **kwargs)
    except UnexpectedModelBehavior as e:
        logger.error("Failed to parse analysis response: %s", e)
        return ErrorAnalysis(
            summary=f"Error pattern: {group.pattern} ({group.count} occurrences)",
            possible_causes=["Unable to determine root cause automatically"],
            suggestions=["Review error logs manually", "Check application metrics"],
        )
    except Exception as e:
        raise AnalysisError(f"Failed to run LLM for analysis: {e}") from e

    output = result.output
    return ErrorAnalysis(
        summary=output.summary,
        possible_causes=output.possible_causes,
        suggestions=output.suggestions,
    )
