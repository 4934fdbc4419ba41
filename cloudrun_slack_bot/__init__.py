"""Slack bot for Cloud Run services and jobs with LLM-assisted error triage."""

__version__ = "0.1.0"
