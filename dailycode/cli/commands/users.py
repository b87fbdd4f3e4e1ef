"""User Commands - inspect one user's streak, mastery and statistics."""

from typing import Optional

import typer

from dailycode.cli.options import parse_date, parse_user_id
from dailycode.cli.runner import run_async
from dailycode.cli.ui.display import (
    console,
    display_mastery_overview,
    display_progress_stats,
    display_streak_info,
)
from dailycode.shared.exceptions import DailyCodeException
from dailycode.shared.service_registry import get_service_registry


def streak(
    user: str = typer.Argument(..., help="User id"),
    day: Optional[str] = typer.Option(
        None,
        "--date",
        "-d",
        help="Count the streak as of this UTC day (YYYY-MM-DD)",
    ),
) -> None:
    """Recompute and show a user's streak."""
    user_id = parse_user_id(user)
    service = get_service_registry().get_streak_service()
    try:
        info = run_async(service.refresh(user_id, parse_date(day)))
    except DailyCodeException as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    display_streak_info(info)


def mastery(
    user: str = typer.Argument(..., help="User id"),
) -> None:
    """Show a user's topic mastery."""
    user_id = parse_user_id(user)
    overview = run_async(get_service_registry().get_mastery_service().get_overview(user_id))
    display_mastery_overview(overview)


def stats(
    user: str = typer.Argument(..., help="User id"),
    timeframe: int = typer.Option(30, "--timeframe", "-t", min=1, help="Days covered by recent figures"),
) -> None:
    """Show a user's progress statistics and advice."""
    user_id = parse_user_id(user)
    service = get_service_registry().get_progress_service()
    progress_stats = run_async(service.get_stats(user_id, timeframe_days=timeframe))
    display_progress_stats(progress_stats, timeframe)

    analysis = run_async(service.analyze_user_performance(user_id))
    console.print("\n[bold]Advice:[/bold]")
    for line in analysis.recommendations:
        console.print(f"  - {line}")
