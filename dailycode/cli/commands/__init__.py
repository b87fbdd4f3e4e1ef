"""CLI Commands - Command modules."""

from dailycode.cli.commands.jobs import jobs_app

__all__ = ["jobs_app"]
