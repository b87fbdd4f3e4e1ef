"""Display Utilities - Rich output formatting."""

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()


def _mastery_color(level: int) -> str:
    if level >= 70:
        return "green"
    if level >= 40:
        return "yellow"
    return "red"


def display_job_results(title: str, results: dict[str, Any]) -> None:
    """Display the summary dict returned by a batch job."""
    errors = results.get("errors", [])
    border = "red" if errors else "green"
    console.print(Panel.fit(f"[bold]{title}[/bold]", border_style=border))

    table = Table(show_header=False, box=None)
    table.add_column("Stat", style="bold")
    table.add_column("Value")

    for key, value in results.items():
        if key in ("errors", "started_at", "completed_at"):
            continue
        if key == "duration_seconds":
            value = f"{value:.2f}s"
        table.add_row(key.replace("_", " ").capitalize(), str(value))

    console.print(table)

    if errors:
        console.print(f"\n[red]{len(errors)} error(s):[/red]")
        for error in errors[:10]:
            console.print(f"  - {error}")
        if len(errors) > 10:
            console.print(f"  [dim]... and {len(errors) - 10} more[/dim]")


def display_streak_info(streak) -> None:
    """Display streak information."""
    current = streak.current_streak
    longest = streak.longest_streak

    if current > 0:
        console.print(Panel.fit(
            f"[bold green]{current}[/bold green] day streak\n"
            f"[dim]Best: {longest} days[/dim]",
            title="Streak",
            border_style="green",
        ))
    else:
        console.print(Panel.fit(
            "[dim]No active streak[/dim]\n"
            f"[dim]Best: {longest} days[/dim]",
            title="Streak",
            border_style="dim",
        ))

    if not streak.recent_activity:
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Date")
    table.add_column("Status")
    for day in streak.recent_activity:
        if day.completed:
            state = "[green]completed[/green]"
        elif day.skipped:
            state = "[yellow]skipped[/yellow]"
        else:
            state = "[dim]open[/dim]"
        table.add_row(day.date.isoformat(), state)
    console.print(table)


def display_mastery_overview(overview) -> None:
    """Display topic masteries with a bar per topic."""
    color = _mastery_color(overview.overall_mastery)
    console.print(Panel.fit(
        f"Overall mastery: [{color}]{overview.overall_mastery}%[/{color}]",
        title="Topic Mastery",
        border_style="cyan",
    ))

    if not overview.topics:
        console.print("[dim]No topics practiced yet[/dim]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Topic", min_width=20)
    table.add_column("Mastery", min_width=24)
    table.add_column("Solved", justify="right")
    table.add_column("Next", width=8)

    for mastery in overview.topics:
        level = mastery.mastery_level
        color = _mastery_color(level)
        bar = "#" * (level // 5) + "-" * (20 - level // 5)
        table.add_row(
            mastery.topic.value,
            f"[{color}]{bar}[/{color}] {level}%",
            f"{mastery.total_solved}/{mastery.total_attempted}",
            mastery.recommended_difficulty.value,
        )
    console.print(table)

    if overview.focus_topics:
        console.print("\n[yellow]Focus on:[/yellow]")
        for focus in overview.focus_topics:
            console.print(f"  - {focus.topic.value} ({focus.mastery_level}%): {focus.reason}")


def display_progress_stats(stats, timeframe_days: int) -> None:
    """Display progress totals and the per-topic breakdown."""
    table = Table(show_header=False, box=None)
    table.add_column("Stat", style="bold")
    table.add_column("Value")
    table.add_row("Solved", str(stats.total_solved))
    table.add_row("Attempted", str(stats.total_attempted))
    table.add_row("Success rate", f"{stats.success_rate}%")
    table.add_row(f"Solved (last {timeframe_days} days)", str(stats.recent_solved))
    console.print(table)

    if stats.topic_stats:
        topics = Table(show_header=True, header_style="bold magenta")
        topics.add_column("Topic")
        topics.add_column("Attempted", justify="right")
        topics.add_column("Solved", justify="right")
        topics.add_column("Avg attempts", justify="right")
        for group in stats.topic_stats:
            topics.add_row(
                group.key,
                str(group.attempted),
                str(group.solved),
                f"{group.average_attempts:.1f}",
            )
        console.print(topics)


def display_jobs(jobs: list[dict[str, Any]]) -> None:
    """Display scheduled background jobs."""
    if not jobs:
        console.print("[dim]No jobs scheduled[/dim]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Job", min_width=24)
    table.add_column("Trigger")
    table.add_column("Next run")
    table.add_column("Description", style="dim")
    for job in jobs:
        table.add_row(
            job["id"],
            job["trigger"],
            job["next_run"] or "[dim]not started[/dim]",
            job.get("description", ""),
        )
    console.print(table)
