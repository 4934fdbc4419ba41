"""Configuration inspection commands."""

import typer
from rich.console import Console

from ..config import BotConfig
from ..errors import ConfigError

app = typer.Typer(
    help="Inspect bot configuration",
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


@app.command()
def show() -> None:
    """Show the configuration loaded from the environment (without secrets)."""
    try:
        config = BotConfig.from_env()
    except ConfigError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    console.print("[bold]Configuration loaded:[/bold]")
    for line in config.summary_lines():
        console.print(f"  {line}", highlight=False)

    try:
        config.validate_settings()
    except ConfigError as e:
        console.print(f"[yellow]⚠️ {e}[/yellow]")
