"""CLI UI components."""

from dailycode.cli.ui.display import (
    console,
    display_job_results,
    display_jobs,
    display_mastery_overview,
    display_progress_stats,
    display_streak_info,
)

__all__ = [
    "console",
    "display_job_results",
    "display_jobs",
    "display_mastery_overview",
    "display_progress_stats",
    "display_streak_info",
]
