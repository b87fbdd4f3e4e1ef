"""Unit tests for background job scheduler."""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from apscheduler.jobstores.base import JobLookupError

from dailycode.jobs.scheduler import DEFAULT_JOBS, JobScheduler, find_job, get_scheduler


@pytest.fixture
def jobs_enabled():
    """Enable background jobs for the scheduler under test."""
    with patch("dailycode.jobs.scheduler.get_feature_flags") as mock:
        flags = MagicMock()
        flags.is_enabled.return_value = True
        mock.return_value = flags
        yield flags


class TestDefaultJobs:
    """Tests for the declared schedule."""

    def test_ids_are_unique(self):
        ids = [job.id for job in DEFAULT_JOBS]
        assert len(ids) == len(set(ids)) == 4

    def test_every_job_resolves_to_a_task(self):
        for job in DEFAULT_JOBS:
            assert callable(job.task)

    @pytest.mark.parametrize(
        "job_id,cron",
        [
            ("daily-recommendations", "0 0 * * *"),
            ("mastery-sweep", "0 */6 * * *"),
            ("recommendation-cleanup", "0 2 * * *"),
            ("activity-analysis", "0 1 * * 0"),
        ],
    )
    def test_crons(self, job_id, cron):
        assert find_job(job_id).cron == cron

    def test_unknown_job(self):
        with pytest.raises(KeyError):
            find_job("nightly-backup")


class TestJobScheduler:
    """Tests for JobScheduler class."""

    def test_initial_state(self):
        scheduler = JobScheduler()

        assert not scheduler.is_running
        assert get_scheduler() is get_scheduler()

    def test_start_with_feature_enabled(self, jobs_enabled):
        scheduler = JobScheduler()

        with patch.object(scheduler.scheduler, "start") as mock_start:
            scheduler.start()

        mock_start.assert_called_once()
        assert scheduler.is_running

    def test_start_with_feature_disabled(self):
        """Test scheduler does not start when background jobs are off."""
        scheduler = JobScheduler()
        scheduler.start()

        assert not scheduler.is_running

    def test_shutdown(self, jobs_enabled):
        scheduler = JobScheduler()
        with patch.object(scheduler.scheduler, "start"):
            scheduler.start()

        with patch.object(scheduler.scheduler, "shutdown") as mock_shutdown:
            scheduler.shutdown()

        mock_shutdown.assert_called_once_with(wait=True)
        assert not scheduler.is_running

    def test_add_job_on_interval(self):
        scheduler = JobScheduler()

        async def task():
            pass

        job_id = scheduler.add_job(task, every=timedelta(hours=6), job_id="six-hourly")

        assert job_id == "six-hourly"
        assert "interval" in scheduler.get_jobs()[0]["trigger"]

    def test_add_job_requires_schedule(self):
        scheduler = JobScheduler()

        async def task():
            pass

        with pytest.raises(ValueError, match="Must specify"):
            scheduler.add_job(task, job_id="no-schedule")
        with pytest.raises(ValueError, match="Must specify"):
            scheduler.add_job(task, every=timedelta(0), job_id="zero")

    def test_remove_job(self):
        scheduler = JobScheduler()
        scheduler.schedule(find_job("mastery-sweep"))

        assert scheduler.remove_job("mastery-sweep") is True
        assert scheduler.get_jobs() == []

    def test_remove_nonexistent_job(self):
        scheduler = JobScheduler()

        with patch.object(scheduler.scheduler, "remove_job", side_effect=JobLookupError("nope")):
            assert scheduler.remove_job("nope") is False

    def test_default_jobs_are_registered(self):
        scheduler = JobScheduler()

        job_ids = scheduler.schedule_all_default_jobs()

        assert job_ids == [job.id for job in DEFAULT_JOBS]
        jobs = scheduler.get_jobs()
        assert {job["id"] for job in jobs} == set(job_ids)
        assert all(job["next_run"] is None for job in jobs)

    def test_rescheduling_replaces(self):
        scheduler = JobScheduler()
        scheduler.schedule_all_default_jobs()
        scheduler.schedule_all_default_jobs()

        ids = [job["id"] for job in scheduler.get_jobs()]
        assert sorted(ids) == sorted(job.id for job in DEFAULT_JOBS)

    def test_rescheduling_one_job_keeps_latest_trigger(self):
        scheduler = JobScheduler()

        async def task():
            pass

        scheduler.add_job(task, cron="0 0 * * *", job_id="nightly")
        scheduler.add_job(task, every=timedelta(hours=1), job_id="nightly")

        jobs = scheduler.get_jobs()
        assert len(jobs) == 1
        assert "interval" in jobs[0]["trigger"]

    @pytest.mark.asyncio
    async def test_run_now(self):
        scheduler = JobScheduler()
        result = {"errors": []}

        with patch("dailycode.jobs.tasks.run_mastery_sweep", AsyncMock(return_value=result)) as task:
            assert await scheduler.run_now("mastery-sweep") is result

        task.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_run_now_unknown_job(self):
        with pytest.raises(KeyError):
            await JobScheduler().run_now("nightly-backup")


class TestOutcomeLogging:
    """Tests for the job outcome listener."""

    def test_reports_errors(self, caplog):
        event = SimpleNamespace(job_id="mastery-sweep", exception=None, retval={"errors": ["boom"]})

        JobScheduler._log_outcome(event)

        assert "finished with 1 error(s)" in caplog.text

    def test_reports_crash(self, caplog):
        event = SimpleNamespace(job_id="mastery-sweep", exception=RuntimeError("down"), retval=None)

        JobScheduler._log_outcome(event)

        assert "crashed" in caplog.text
