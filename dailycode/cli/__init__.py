"""CLI Module - Admin command-line interface built with Typer and Rich.

Usage:
    dailycode --help                        Show all commands
    dailycode generate-daily --date 2024-03-01
    dailycode recompute-mastery --user <id>
    dailycode cleanup
    dailycode streak <user-id>
    dailycode jobs list
"""

from dailycode.cli.main import app, main

__all__ = ["app", "main"]
