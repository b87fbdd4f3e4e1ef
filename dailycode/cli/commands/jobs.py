"""Job Commands - inspect and trigger the background job schedule."""

import typer

from dailycode.cli.runner import run_async
from dailycode.cli.ui.display import console, display_job_results, display_jobs
from dailycode.jobs.scheduler import DEFAULT_JOBS, JobScheduler

jobs_app = typer.Typer(help="Background job commands")


@jobs_app.command("list")
def list_jobs() -> None:
    """Show the default job schedule."""
    scheduler = JobScheduler()
    scheduler.schedule_all_default_jobs()
    descriptions = {job.id: job.description for job in DEFAULT_JOBS}
    display_jobs([
        {**job, "description": descriptions.get(job["id"], "")}
        for job in scheduler.get_jobs()
    ])


@jobs_app.command("run")
def run_job(
    job_id: str = typer.Argument(..., help=f"One of: {', '.join(job.id for job in DEFAULT_JOBS)}"),
) -> None:
    """Run one scheduled job immediately."""
    try:
        results = run_async(JobScheduler().run_now(job_id))
    except KeyError:
        console.print(f"[red]Unknown job:[/red] {job_id}")
        raise typer.Exit(1)

    display_job_results(job_id, results)
    if results["errors"]:
        raise typer.Exit(1)
