"""Background job scheduler for the engine's batch operations.

The schedule is declared once in `DEFAULT_JOBS` and used both by the
APScheduler instance running inside the API process and by the
``dailycode jobs`` CLI. Jobs only trigger operations; every decision is made
by the services the tasks call.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Any, Awaitable, Callable, Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from dailycode.shared.feature_flags import FeatureFlags, get_feature_flags

logger = logging.getLogger(__name__)

JobResult = dict[str, Any]


@dataclass(frozen=True)
class ScheduledJob:
    """One entry of the default schedule. Crons are in UTC."""

    id: str
    cron: str
    task_name: str
    description: str

    @property
    def task(self) -> Callable[[], Awaitable[JobResult]]:
        # tasks pulls in the service registry, so resolve it lazily
        from dailycode.jobs import tasks

        return getattr(tasks, self.task_name)


DEFAULT_JOBS: tuple[ScheduledJob, ...] = (
    ScheduledJob(
        "daily-recommendations",
        "0 0 * * *",
        "run_daily_recommendations",
        "Create today's recommendation for every recently active user",
    ),
    ScheduledJob(
        "mastery-sweep",
        "0 */6 * * *",
        "run_mastery_sweep",
        "Recompute topic mastery for recently active users",
    ),
    ScheduledJob(
        "recommendation-cleanup",
        "0 2 * * *",
        "run_recommendation_cleanup",
        "Delete old recommendations and refresh streaks",
    ),
    ScheduledJob(
        "activity-analysis",
        "0 1 * * 0",
        "run_activity_analysis",
        "Weekly engagement summary",
    ),
)

_JOBS_BY_ID = {job.id: job for job in DEFAULT_JOBS}


def find_job(job_id: str) -> ScheduledJob:
    """Look up a default job by id.

    Raises:
        KeyError: If no default job has that id
    """
    return _JOBS_BY_ID[job_id]


class JobScheduler:
    """Owns the APScheduler instance for the process.

    Usage:
        scheduler = JobScheduler()
        scheduler.schedule_all_default_jobs()
        scheduler.start()
    """

    def __init__(self) -> None:
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._is_running = False
        self._flags = get_feature_flags()

    @property
    def scheduler(self) -> AsyncIOScheduler:
        if self._scheduler is None:
            self._scheduler = AsyncIOScheduler(
                jobstores={"default": MemoryJobStore()},
                executors={"default": AsyncIOExecutor()},
                job_defaults={
                    "coalesce": True,
                    "max_instances": 1,
                    "misfire_grace_time": 60 * 15,
                },
                timezone="UTC",
            )
            self._scheduler.add_listener(self._log_outcome, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)
        return self._scheduler

    @property
    def is_running(self) -> bool:
        return self._is_running and self._scheduler is not None

    def start(self) -> None:
        """Start running scheduled jobs, if background jobs are enabled."""
        if not self._flags.is_enabled(FeatureFlags.ENABLE_BACKGROUND_JOBS):
            logger.info("Background jobs disabled by feature flag")
            return
        if self._is_running:
            logger.warning("Scheduler already running")
            return

        self.scheduler.start()
        self._is_running = True
        logger.info(f"Background job scheduler started with {len(self.scheduler.get_jobs())} job(s)")

    def shutdown(self, wait: bool = True) -> None:
        if not self._is_running or self._scheduler is None:
            return
        self._scheduler.shutdown(wait=wait)
        self._is_running = False
        logger.info("Background job scheduler stopped")

    def add_job(
        self,
        func: Callable[..., Awaitable[Any]],
        *,
        cron: Optional[str] = None,
        every: Optional[timedelta] = None,
        job_id: Optional[str] = None,
        **kwargs: Any,
    ) -> str:
        """Schedule `func` on a cron expression or a fixed interval.

        Raises:
            ValueError: If neither `cron` nor a positive `every` is given
        """
        if cron:
            trigger = CronTrigger.from_crontab(cron, timezone="UTC")
        elif every and every.total_seconds() > 0:
            trigger = IntervalTrigger(seconds=every.total_seconds())
        else:
            raise ValueError("Must specify cron or a positive interval")

        job_id = job_id or f"{func.__module__}.{func.__name__}"
        # replace_existing only covers started schedulers; pending jobs are a plain list
        if self.scheduler.get_job(job_id) is not None:
            self.scheduler.remove_job(job_id)

        job = self.scheduler.add_job(
            func,
            trigger=trigger,
            id=job_id,
            replace_existing=True,
            kwargs=kwargs,
        )
        logger.info(f"Scheduled job '{job.id}' with trigger: {trigger}")
        return job.id

    def schedule(self, job: ScheduledJob) -> str:
        return self.add_job(job.task, cron=job.cron, job_id=job.id)

    def schedule_all_default_jobs(self) -> list[str]:
        job_ids = [self.schedule(job) for job in DEFAULT_JOBS]
        logger.info(f"Scheduled {len(job_ids)} default background jobs")
        return job_ids

    def remove_job(self, job_id: str) -> bool:
        """Unschedule a job; False if it was not scheduled."""
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            logger.warning(f"Job '{job_id}' not found")
            return False
        logger.info(f"Removed job '{job_id}'")
        return True

    def get_jobs(self) -> list[dict[str, Any]]:
        """Scheduled jobs with their trigger and next run (None until started)."""
        jobs = []
        for job in self.scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "trigger": str(job.trigger),
                "next_run": next_run.isoformat() if next_run else None,
            })
        return jobs

    async def run_now(self, job_id: str) -> JobResult:
        """Run a default job immediately, outside the schedule.

        Raises:
            KeyError: If no default job has that id
        """
        job = find_job(job_id)
        logger.info(f"Running job '{job_id}' on demand")
        return await job.task()

    @staticmethod
    def _log_outcome(event: JobExecutionEvent) -> None:
        if event.exception is not None:
            logger.error(f"Job '{event.job_id}' crashed: {event.exception!r}")
            return
        errors = (event.retval or {}).get("errors", [])
        if errors:
            logger.warning(f"Job '{event.job_id}' finished with {len(errors)} error(s)")
        else:
            logger.info(f"Job '{event.job_id}' finished")


@lru_cache(maxsize=1)
def get_scheduler() -> JobScheduler:
    """Process-wide scheduler."""
    return JobScheduler()


def reset_scheduler() -> None:
    """Stop and forget the process-wide scheduler (for tests)."""
    if get_scheduler.cache_info().currsize:
        scheduler = get_scheduler()
        if scheduler.is_running:
            scheduler.shutdown(wait=False)
    get_scheduler.cache_clear()
