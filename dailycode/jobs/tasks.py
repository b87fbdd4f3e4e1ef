"""Scheduled task definitions for background jobs.

This module contains the task implementations executed by the
JobScheduler. Each task is an async function that calls the engine's
plain batch operations and returns a summary dict; none of them raises.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any

from dailycode.shared.config import get_settings
from dailycode.shared.service_registry import get_service_registry

logger = logging.getLogger(__name__)


def _start(**counters: Any) -> tuple[datetime, dict[str, Any]]:
    start_time = datetime.now(timezone.utc)
    results = {'started_at': start_time.isoformat(), **counters, 'errors': []}
    return start_time, results


def _finish(start_time: datetime, results: dict[str, Any]) -> dict[str, Any]:
    results['completed_at'] = datetime.now(timezone.utc).isoformat()
    results['duration_seconds'] = (
        datetime.now(timezone.utc) - start_time
    ).total_seconds()
    return results


async def run_daily_recommendations(day: date | None = None) -> dict[str, Any]:
    """Generate the day's recommendation for every recently active user.

    Users who already have a recommendation for the day are skipped and a
    failure for one user does not stop the others.

    Args:
        day: UTC day to generate for; today if omitted

    Returns:
        Summary of generation results.
    """
    logger.info("Starting daily recommendation generation job")
    start_time, results = _start(day=None, users=0, generated=0, skipped=0)

    try:
        service = get_service_registry().get_recommendation_service()
        batch = await service.generate_for_active_users(day)
        results['day'] = batch.day.isoformat()
        results['users'] = batch.total
        results['generated'] = batch.generated
        results['skipped'] = batch.skipped
        results['errors'].extend(batch.errors)
    except Exception as e:
        error_msg = f"Daily recommendation job failed: {e}"
        logger.exception(error_msg)
        results['errors'].append(error_msg)

    logger.info(
        f"Daily recommendation job completed. Success: {results['generated']}, "
        f"Errors: {len(results['errors'])}"
    )
    return _finish(start_time, results)


async def run_mastery_sweep() -> dict[str, Any]:
    """Recompute topic mastery for users with recent progress.

    Every topic a user has touched is recomputed from the progress records,
    which repairs any mastery document that drifted or was never written.

    Returns:
        Summary of the sweep.
    """
    logger.info("Starting topic mastery update job")
    start_time, results = _start(users=0, topics_recomputed=0)

    try:
        registry = get_service_registry()
        window = get_settings().mastery_sweep_window_days
        since = registry.clock.now() - timedelta(days=window)
        sweep = await registry.get_mastery_service().recompute_recent(since)
        results['users'] = sweep.users
        results['topics_recomputed'] = sweep.topics_recomputed
        results['errors'].extend(sweep.errors)
    except Exception as e:
        error_msg = f"Topic mastery update job failed: {e}"
        logger.exception(error_msg)
        results['errors'].append(error_msg)

    logger.info(f"Topic mastery update completed. Updated {results['topics_recomputed']} topic masteries")
    return _finish(start_time, results)


async def run_recommendation_cleanup() -> dict[str, Any]:
    """Delete old recommendations and refresh every active user's streak.

    Returns:
        Summary of cleanup results.
    """
    logger.info("Starting data cleanup job")
    start_time, results = _start(recommendations_removed=0, streaks_updated=0)
    registry = get_service_registry()

    try:
        retention = get_settings().recommendation_retention_days
        results['recommendations_removed'] = await registry.get_recommendation_service().cleanup(retention)
    except Exception as e:
        error_msg = f"Recommendation cleanup failed: {e}"
        logger.exception(error_msg)
        results['errors'].append(error_msg)

    try:
        refreshed, errors = await registry.get_streak_service().refresh_active_users()
        results['streaks_updated'] = refreshed
        results['errors'].extend(errors)
    except Exception as e:
        error_msg = f"Streak refresh failed: {e}"
        logger.exception(error_msg)
        results['errors'].append(error_msg)

    return _finish(start_time, results)


async def run_activity_analysis() -> dict[str, Any]:
    """Log weekly engagement figures.

    Returns:
        Total and active users, engagement rate and the number of
        recommendations completed in the last seven days.
    """
    logger.info("Starting weekly user activity analysis")
    start_time, results = _start(
        total_users=0,
        active_users=0,
        engagement_rate=0.0,
        completed_recommendations=0,
    )

    try:
        registry = get_service_registry()
        now = registry.clock.now()
        week_ago = now - timedelta(days=7)

        async with registry.get_uow_factory()() as uow:
            total_users = await uow.users.count()
            active_users = await uow.users.count(active_since=week_ago)
            completed = await uow.recommendations.count_completed_since(week_ago.date())

        results['total_users'] = total_users
        results['active_users'] = active_users
        results['engagement_rate'] = (
            round(active_users / total_users * 100, 2) if total_users > 0 else 0.0
        )
        results['completed_recommendations'] = completed

        logger.info(
            f"Weekly Analysis - Total Users: {total_users}, Active Users: {active_users}, "
            f"Engagement Rate: {results['engagement_rate']:.2f}%, "
            f"Completed Recommendations: {completed}"
        )
    except Exception as e:
        error_msg = f"Weekly analysis job failed: {e}"
        logger.exception(error_msg)
        results['errors'].append(error_msg)

    return _finish(start_time, results)
