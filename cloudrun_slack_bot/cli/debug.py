"""Debug commands for Cloud Run error analysis."""

import asyncio
from datetime import timedelta

import typer
from pydantic_ai.models import Model
from rich.console import Console
from rich.table import Table

from ..ai.agents import (
    create_analysis_agent,
    create_grouping_agent,
    create_vertex_model,
)
from ..cloud_logging.client import LoggingClient, LogSource
from ..config import BotConfig
from ..debug.debugger import Debugger
from ..debug.models import DebugResult
from ..errors import BotError, ConfigError
from ..slack.client import SlackClient
from ..slack.config import SlackConfig

app = typer.Typer(
    help="Debug Cloud Run services and jobs",
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()

RESOURCE_TYPES = ("service", "job")


def build_model(config: BotConfig) -> Model | str:
    """Build the PydanticAI model used by the debug agents."""
    if not config.uses_vertex:
        return config.model_name
    return create_vertex_model(
        config.model_name, config.gcp_project_id, config.vertex_location
    )


def build_debugger(config: BotConfig, lookback: timedelta) -> Debugger:
    """Create a debugger with one logging client per configured project."""
    model = build_model(config)
    log_sources: dict[str, LogSource] = {
        project.id: LoggingClient(project.id) for project in config.projects
    }
    return Debugger(
        log_sources=log_sources,
        grouping_agent=create_grouping_agent(model),
        analysis_agent=create_analysis_agent(model),
        lookback=lookback,
    )


def print_debug_result(result: DebugResult) -> None:
    """Print a debug result as a rich table."""
    console.print(
        f"\n[bold]Debug analysis for {result.resource_type} "
        f"{result.resource_name}[/bold] (project {result.project_id}, "
        f"last {result.lookback_minutes} minutes)"
    )
    if result.total_errors == 0:
        console.print("[green]✅ No errors found[/green]")
        return

    console.print(
        f"{result.total_errors} errors in {len(result.error_groups)} groups\n"
    )
    table = Table(show_lines=True)
    table.add_column("Pattern", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Representative", style="yellow")
    table.add_column("Summary")
    for group in result.error_groups:
        summary = group.analysis.summary
        if not group.analysis.analyzed:
            summary = f"[red]{summary}[/red]"
        table.add_row(
            group.pattern, str(group.error_count), group.representative, summary
        )
    console.print(table)


@app.command()
def run(
    project: str = typer.Option(
        ...,
        "--project",
        "-p",
        help="GCP project id",
        rich_help_panel="Target Selection",
    ),
    name: str = typer.Option(
        ...,
        "--name",
        "-n",
        help="Cloud Run service or job name",
        rich_help_panel="Target Selection",
    ),
    resource_type: str = typer.Option(
        "service",
        "--type",
        "-t",
        help="Resource type: service or job",
        rich_help_panel="Target Selection",
    ),
    lookback: int | None = typer.Option(
        None,
        "--lookback",
        "-l",
        min=1,
        help="Minutes to look back for errors (default: DEBUG_TIME_WINDOW)",
        rich_help_panel="Analysis Options",
    ),
    post: bool = typer.Option(
        False,
        "--post/--no-post",
        help="Post the result to the Slack channel mapped to the resource",
        rich_help_panel="Output Options",
    ),
    channel: str | None = typer.Option(
        None,
        "--channel",
        "-c",
        help="Slack channel override for --post",
        rich_help_panel="Output Options",
    ),
) -> None:
    """Group and analyze recent errors of a Cloud Run service or job.

    Examples:

        # Analyze the last 30 minutes of a service
        cloudrun-slack-bot debug run --project my-project --name api

        # Analyze a job over the last 2 hours and post to Slack
        cloudrun-slack-bot debug run -p my-project -n nightly -t job \\
            --lookback 120 --post
    """
    if resource_type not in RESOURCE_TYPES:
        console.print(
            f"[red]❌ Invalid resource type '{resource_type}'. "
            f"Use one of: {', '.join(RESOURCE_TYPES)}[/red]"
        )
        raise typer.Exit(1)

    try:
        config = BotConfig.from_env()
        if not config.debug_enabled:
            raise ConfigError("Debug feature is disabled. Set DEBUG_ENABLED=true.")
        config.validate_debug()
        if config.project_config(project) is None:
            raise ConfigError(f"Project {project} is not in PROJECTS_CONFIG")
    except ConfigError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    window = timedelta(minutes=lookback) if lookback is not None else config.lookback
    target_channel = channel or config.channel_for_service(project, name)
    slack = SlackClient(
        SlackConfig(
            bot_token=config.slack_bot_token,
            default_channel=config.default_channel,
        )
    )

    try:
        debugger = build_debugger(config, window)
        result = asyncio.run(debugger.debug_resource(project, resource_type, name))
    except BotError as e:
        console.print(
            f"[red]❌ Debug analysis failed for {resource_type} {name}: {e}[/red]"
        )
        if post and target_channel:
            slack.post_analysis_failed(target_channel, resource_type, name, str(e))
        raise typer.Exit(1)

    print_debug_result(result)

    if post:
        if not target_channel:
            console.print("[yellow]No Slack channel configured, skipping post[/yellow]")
        elif slack.post_debug_result(target_channel, result):
            console.print(f"[green]✓ Posted result to {target_channel}[/green]")
        else:
            console.print(f"[red]✗ Failed to post result to {target_channel}[/red]")
            raise typer.Exit(1)
