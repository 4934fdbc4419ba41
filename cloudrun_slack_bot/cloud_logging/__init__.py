"""Cloud Logging access for error and trace logs."""

from .client import LoggingClient, LogSource
from .models import LogEntry

__all__ = ["LogEntry", "LogSource", "LoggingClient"]
