"""Recommendation service - the daily recommended problem of each user.

Get-or-create is idempotent: once a user has a recommendation for a UTC
day it is returned as stored, with no recomputation. Concurrent creators
are resolved by the (user_id, date) uniqueness of the store; the loser
re-reads and returns the winner's record.
"""

import logging
import random
from dataclasses import replace
from datetime import date, datetime, timedelta
from uuid import UUID

from dailycode.modules.problems.selector import ProblemSelector
from dailycode.modules.recommendation.interface import (
    BatchResult,
    DailyRecommendation,
    RecommendationFeedback,
    RecommendedProblem,
    SelectionRule,
    TopicChoice,
)
from dailycode.modules.recommendation.policy import choose_topic
from dailycode.shared.constants import (
    DAILY_RECOMMENDATION_PRIORITY,
    DAILY_RECOMMENDATION_SCORE,
    DEFAULT_DIFFICULTY,
    DEFAULT_TOPIC,
)
from dailycode.shared.datetime_utils import Clock, SystemClock, to_day
from dailycode.shared.exceptions import (
    DuplicateRecordError,
    RecommendationAlreadyClosedError,
    RecommendationNotFoundError,
    UserNotFoundError,
)
from dailycode.shared.models import RecommendationReason
from dailycode.shared.repository import UnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)

DEFAULT_ACTIVE_WINDOW_DAYS = 7


async def complete_if_selected(
    uow: UnitOfWork,
    user_id: UUID,
    problem_id: UUID,
    at: datetime,
) -> bool:
    """Mark the day's recommendation completed when `problem_id` is its pick.

    Skipped or already completed recommendations are left alone.

    Returns:
        True if the recommendation was completed by this call
    """
    rec = await uow.recommendations.get(user_id, to_day(at))
    if rec is None or rec.selected_problem_id != problem_id:
        return False
    if rec.completed or rec.skipped:
        return False

    rec.completed = True
    rec.completed_at = at
    await uow.recommendations.save(rec)
    logger.info(f"Daily recommendation for user {user_id} on {rec.date} completed")
    return True


class RecommendationService:
    """Creates and updates daily recommendations."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        active_window_days: int = DEFAULT_ACTIVE_WINDOW_DAYS,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()
        self._rng = rng or random.Random()
        self._active_window_days = active_window_days

    def _day(self, day: date | datetime | None) -> date:
        return to_day(day) if day is not None else self._clock.today()

    async def get_daily(self, user_id: UUID, day: date | datetime | None = None) -> DailyRecommendation | None:
        """Stored recommendation for the day, without creating one."""
        async with self._uow_factory() as uow:
            return await uow.recommendations.get(user_id, self._day(day))

    async def get_or_create_daily(
        self,
        user_id: UUID,
        day: date | datetime | None = None,
    ) -> DailyRecommendation:
        """Return the user's recommendation for the day, creating it if needed.

        Args:
            user_id: User to recommend for
            day: Any datetime or date in the target UTC day; today if omitted

        Returns:
            The stored recommendation, unchanged if it already existed

        Raises:
            UserNotFoundError: If a recommendation must be created for an unknown user
            NoActiveProblemsError: If the catalog has no active problem
        """
        rec, _ = await self._get_or_create(user_id, self._day(day))
        return rec

    async def _get_or_create(self, user_id: UUID, day: date) -> tuple[DailyRecommendation, bool]:
        async with self._uow_factory() as uow:
            existing = await uow.recommendations.get(user_id, day)
        if existing is not None:
            return existing, False

        choice = await self._choose(user_id)

        async with self._uow_factory() as uow:
            problem = await ProblemSelector(uow.problems, self._rng).select(
                topic=choice.topic,
                difficulty=choice.difficulty,
            )
            rec = DailyRecommendation(
                user_id=user_id,
                date=day,
                selected_problem_id=problem.id,
                recommended_problems=[
                    RecommendedProblem(
                        problem_id=problem.id,
                        topic=problem.topic,
                        difficulty=problem.difficulty,
                        reason=RecommendationReason.DAILY_RECOMMENDATION,
                        priority=DAILY_RECOMMENDATION_PRIORITY,
                        score=DAILY_RECOMMENDATION_SCORE,
                    )
                ],
                created_at=self._clock.now(),
            )
            try:
                created = await uow.recommendations.add(rec)
            except DuplicateRecordError:
                winner = await uow.recommendations.get(user_id, day)
                if winner is None:
                    raise
                logger.warning(
                    f"Recommendation for user {user_id} on {day} was created concurrently, "
                    "returning the existing one"
                )
                return winner, False

        logger.info(
            f"Created daily recommendation for user {user_id} on {day}: problem {problem.id} "
            f"({problem.topic.value}/{problem.difficulty.value}, rule={choice.rule.value})"
        )
        return created, True

    async def _choose(self, user_id: UUID) -> TopicChoice:
        """Run the topic policy, degrading to the default topic if its inputs fail to load."""
        try:
            async with self._uow_factory() as uow:
                user = await uow.users.get(user_id)
                if user is None:
                    raise UserNotFoundError(user_id)
                masteries = await uow.mastery.list_for_user(user_id)
                attempted = await uow.progress.distinct_topics(user_id)
        except UserNotFoundError:
            raise
        except Exception as e:
            logger.warning(
                f"Could not load personalization data for user {user_id}, "
                f"using {DEFAULT_TOPIC.value}/{DEFAULT_DIFFICULTY.value}: {e}"
            )
            return TopicChoice(DEFAULT_TOPIC, DEFAULT_DIFFICULTY, SelectionRule.DEGRADED)

        return choose_topic(masteries, set(attempted), user.skill_level)

    async def generate_for_active_users(self, day: date | datetime | None = None) -> BatchResult:
        """Create the day's recommendation for every recently active user.

        Users who already have one are skipped. A failure for one user is
        logged and counted and the batch carries on.
        """
        target = self._day(day)
        since = self._clock.now() - timedelta(days=self._active_window_days)
        async with self._uow_factory() as uow:
            users = await uow.users.list_active(since=since)

        result = BatchResult(day=target, total=len(users))
        logger.info(f"Generating recommendations for {len(users)} active users")

        for user in users:
            try:
                async with self._uow_factory() as uow:
                    exists = await uow.recommendations.exists(user.id, target)
                if exists:
                    result.skipped += 1
                    continue
                _, created = await self._get_or_create(user.id, target)
                if created:
                    result.generated += 1
                else:
                    result.skipped += 1
            except Exception as e:
                logger.exception(f"Failed to generate recommendation for user {user.id}")
                result.errors.append(f"{user.id}: {e}")

        logger.info(
            f"Daily recommendation batch for {target} done. Generated: {result.generated}, "
            f"Skipped: {result.skipped}, Errors: {len(result.errors)}"
        )
        return result

    async def _load(self, uow: UnitOfWork, user_id: UUID, day: date) -> DailyRecommendation:
        rec = await uow.recommendations.get(user_id, day)
        if rec is None:
            raise RecommendationNotFoundError(user_id, day)
        return rec

    async def complete_today(self, user_id: UUID, day: date | datetime | None = None) -> DailyRecommendation:
        """Mark the day's recommendation completed. Completing twice is a no-op.

        Raises:
            RecommendationNotFoundError: If there is no recommendation for the day
            RecommendationAlreadyClosedError: If it was skipped
        """
        target = self._day(day)
        async with self._uow_factory() as uow:
            rec = await self._load(uow, user_id, target)
            if rec.skipped:
                raise RecommendationAlreadyClosedError(user_id, target, rec.state)
            if rec.completed:
                return rec
            rec.completed = True
            rec.completed_at = self._clock.now()
            rec = await uow.recommendations.save(rec)
        logger.info(f"Daily recommendation for user {user_id} on {target} completed")
        return rec

    async def skip_today(self, user_id: UUID, day: date | datetime | None = None) -> DailyRecommendation:
        """Mark the day's recommendation skipped. Skipping twice is a no-op.

        Raises:
            RecommendationNotFoundError: If there is no recommendation for the day
            RecommendationAlreadyClosedError: If it was completed
        """
        target = self._day(day)
        async with self._uow_factory() as uow:
            rec = await self._load(uow, user_id, target)
            if rec.completed:
                raise RecommendationAlreadyClosedError(user_id, target, rec.state)
            if rec.skipped:
                return rec
            rec.skipped = True
            rec = await uow.recommendations.save(rec)
        logger.info(f"Daily recommendation for user {user_id} on {target} skipped")
        return rec

    async def submit_feedback(
        self,
        user_id: UUID,
        feedback: RecommendationFeedback,
        day: date | datetime | None = None,
    ) -> DailyRecommendation:
        """Attach feedback to the day's recommendation, replacing earlier feedback."""
        target = self._day(day)
        async with self._uow_factory() as uow:
            rec = await self._load(uow, user_id, target)
            rec = await uow.recommendations.save(replace(rec, feedback=feedback))
        return rec

    async def cleanup(self, retention_days: int) -> int:
        """Delete recommendations dated more than `retention_days` days ago."""
        cutoff = self._clock.today() - timedelta(days=retention_days)
        async with self._uow_factory() as uow:
            deleted = await uow.recommendations.delete_before(cutoff)
        logger.info(f"Removed {deleted} daily recommendations older than {cutoff}")
        return deleted
