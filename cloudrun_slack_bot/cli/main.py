"""Main CLI entry point."""

import typer
from dotenv import load_dotenv
from rich.console import Console

from ..utils.logging import setup_logging
from . import audit, configuration, debug

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="cloudrun-slack-bot",
    help="Cloud Run Slack bot with AI error triage",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"
    ),
) -> None:
    """Cloud Run Slack bot with AI error triage."""
    setup_logging(verbose)


app.add_typer(debug.app, name="debug")
app.add_typer(configuration.app, name="config")
app.add_typer(audit.app, name="audit")


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from cloudrun_slack_bot import __version__

    console.print(f"Cloud Run Slack Bot v{__version__}")


if __name__ == "__main__":
    app()
