"""Batch Commands - run the engine's batch operations by hand.

These are the same operations the scheduler triggers; running them from
the CLI is how a missed day is replayed or a drifted mastery is repaired.
"""

from typing import Optional

import typer
from rich.progress import Progress, SpinnerColumn, TextColumn

from dailycode.cli.options import parse_date, parse_user_id
from dailycode.cli.runner import run_async
from dailycode.cli.ui.display import console, display_job_results, display_mastery_overview
from dailycode.shared.datetime_utils import FixedClock
from dailycode.shared.exceptions import DailyCodeException
from dailycode.shared.models import parse_topic
from dailycode.shared.service_registry import get_service_registry


def generate_daily(
    day: Optional[str] = typer.Option(
        None,
        "--date",
        "-d",
        help="UTC day to generate for (YYYY-MM-DD); today if omitted",
    ),
) -> None:
    """Generate the day's recommendation for every active user."""
    from dailycode.jobs.tasks import run_daily_recommendations

    target = parse_date(day)
    if target is not None:
        # Active-user window and timestamps follow the replayed day
        get_service_registry().use_clock(FixedClock(target))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as prog:
        prog.add_task(description="Generating recommendations...", total=None)
        results = run_async(run_daily_recommendations(target))

    display_job_results("Daily Recommendations", results)
    if results["errors"]:
        raise typer.Exit(1)


def recompute_mastery(
    user: Optional[str] = typer.Option(
        None,
        "--user",
        "-u",
        help="Recompute a single user instead of sweeping recent activity",
    ),
    topic: Optional[str] = typer.Option(
        None,
        "--topic",
        "-t",
        help="Only this topic (requires --user)",
    ),
) -> None:
    """Recompute topic mastery from the progress records."""
    from dailycode.jobs.tasks import run_mastery_sweep

    if topic and not user:
        raise typer.BadParameter("--topic requires --user")

    if user is None:
        results = run_async(run_mastery_sweep())
        display_job_results("Mastery Sweep", results)
        if results["errors"]:
            raise typer.Exit(1)
        return

    user_id = parse_user_id(user)
    service = get_service_registry().get_mastery_service()
    try:
        if topic:
            mastery = run_async(service.recompute(user_id, parse_topic(topic)))
            console.print(
                f"[green]{mastery.topic.value}:[/green] {mastery.mastery_level}% "
                f"(next: {mastery.recommended_difficulty.value})"
            )
            return
        run_async(service.recompute_user(user_id))
        display_mastery_overview(run_async(service.get_overview(user_id)))
    except DailyCodeException as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)


def cleanup() -> None:
    """Delete old recommendations and refresh every active user's streak."""
    from dailycode.jobs.tasks import run_recommendation_cleanup

    results = run_async(run_recommendation_cleanup())
    display_job_results("Cleanup", results)
    if results["errors"]:
        raise typer.Exit(1)


def analyze() -> None:
    """Show engagement over the last seven days."""
    from dailycode.jobs.tasks import run_activity_analysis

    results = run_async(run_activity_analysis())
    display_job_results("Weekly Activity", results)
    if results["errors"]:
        raise typer.Exit(1)
