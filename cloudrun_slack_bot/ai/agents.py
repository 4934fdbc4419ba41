"""PydanticAI agents for the debug workflow."""

from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider

from .models import AnalysisResponse, GroupingResponse
from .prompts import ERROR_ANALYSIS_PROMPT, ERROR_GROUPING_PROMPT

DEFAULT_MODEL = "google-vertex:gemini-2.5-flash-lite"


def create_vertex_model(model_name: str, project: str, location: str) -> GoogleModel:
    """Create a Gemini model served by Vertex AI in the given project/location."""
    provider = GoogleProvider(vertexai=True, project=project, location=location)
    return GoogleModel(model_name, provider=provider)


def create_grouping_agent(
    model: Model | str = DEFAULT_MODEL,
) -> Agent[None, GroupingResponse]:
    """Create the agent that partitions error logs into labelled groups."""
    return Agent(
        model=model,
        output_type=GroupingResponse,
        instructions=ERROR_GROUPING_PROMPT,
        retries=2,
    )


def create_analysis_agent(
    model: Model | str = DEFAULT_MODEL,
) -> Agent[None, AnalysisResponse]:
    """Create the agent that analyzes a single error group."""
    return Agent(
        model=model,
        output_type=AnalysisResponse,
        instructions=ERROR_ANALYSIS_PROMPT,
        retries=2,
    )
