"""Exception types raised by the bot."""


class BotError(Exception):
    """Base class for all bot errors."""


class ConfigError(BotError):
    """Configuration is missing or invalid."""


class LogSourceError(BotError):
    """Log entries could not be retrieved."""


class GroupingError(BotError):
    """The classification agent failed to group error logs."""


class AnalysisError(BotError):
    """The analysis agent failed to analyze an error group."""


class DebugError(BotError):
    """A debug run could not be completed for a resource."""


class AuditLogError(BotError):
    """An audit log event could not be parsed or relayed."""
