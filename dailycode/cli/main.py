"""CLI Entry Point - Admin command interface.

This module provides the entry point for the DailyCode admin CLI. It runs
the engine's batch operations by hand and inspects individual users.
"""

import typer

from dailycode.api.middleware.logging import configure_logging
from dailycode.cli.commands.batch import analyze, cleanup, generate_daily, recompute_mastery
from dailycode.cli.commands.jobs import jobs_app
from dailycode.cli.commands.users import mastery, stats, streak

app = typer.Typer(
    name="dailycode",
    help="DailyCode - daily practice recommendation engine administration",
    no_args_is_help=True,
    pretty_exceptions_enable=True,
)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
) -> None:
    """DailyCode admin commands."""
    configure_logging(log_level)


@app.command("serve")
def serve(
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from dailycode.shared.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "dailycode.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


# Batch operations
app.command("generate-daily")(generate_daily)
app.command("recompute-mastery")(recompute_mastery)
app.command("cleanup")(cleanup)
app.command("analyze")(analyze)

# Per-user inspection
app.command("streak")(streak)
app.command("mastery")(mastery)
app.command("stats")(stats)

app.add_typer(jobs_app, name="jobs", help="Background job schedule")


if __name__ == "__main__":
    app()
