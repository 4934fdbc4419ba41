"""Audit log relay commands."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from ..audit.relay import AuditLogRelay, parse_push_message
from ..config import BotConfig
from ..errors import AuditLogError, ConfigError
from ..slack.client import SlackClient
from ..slack.config import SlackConfig

app = typer.Typer(
    help="Relay Cloud Run audit log events to Slack",
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


@app.command()
def relay(
    file: Path | None = typer.Option(
        None,
        "--file",
        "-f",
        exists=True,
        dir_okay=False,
        help="Pub/Sub push request body (default: read from stdin)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Print the routed message instead of posting it",
    ),
) -> None:
    """Post a Cloud Run audit log event to the channel of its service or job.

    Examples:

        # Relay a saved Pub/Sub push body
        cloudrun-slack-bot audit relay --file event.json

        # Preview routing without posting
        cat event.json | cloudrun-slack-bot audit relay --dry-run
    """
    body = file.read_bytes() if file else typer.get_binary_stream("stdin").read()

    try:
        config = BotConfig.from_env()
        log = parse_push_message(body)
    except (ConfigError, AuditLogError) as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        raise typer.Exit(1)

    relayer = AuditLogRelay(
        config,
        SlackClient(
            SlackConfig(
                bot_token=config.slack_bot_token,
                default_channel=config.default_channel,
            )
        ),
    )

    if dry_run:
        event = relayer.route(log)
        if event is None:
            console.print("[yellow]No channel for this event, nothing to post[/yellow]")
            return
        console.print(f"[bold]Channel:[/bold] {event.channel}", highlight=False)
        console.print_json(json.dumps(event.attachment, ensure_ascii=False))
        return

    try:
        event = relayer.relay(log)
    except AuditLogError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if event is None:
        console.print("[yellow]No channel for this event, nothing posted[/yellow]")
    else:
        console.print(f"[green]✓ Posted audit event to {event.channel}[/green]")
