"""Progress service - records attempts and reports on a user's progress."""

import logging
from collections import defaultdict
from datetime import timedelta
from uuid import UUID

from dailycode.modules.mastery.scoring import round_half_up
from dailycode.modules.mastery.service import MasteryService
from dailycode.modules.progress.interface import (
    AttemptSubmission,
    PerformanceAnalysis,
    Progress,
    ProgressStats,
    SubmissionResult,
)
from dailycode.modules.recommendation.service import complete_if_selected
from dailycode.shared.constants import (
    ANALYSIS_WINDOW,
    STRONG_TOPIC_MIN_ATTEMPTS,
    STRONG_TOPIC_SOLVE_RATIO,
    WEAK_TOPIC_MIN_ATTEMPTS,
    WEAK_TOPIC_SOLVE_RATIO,
)
from dailycode.shared.datetime_utils import Clock, SystemClock
from dailycode.shared.exceptions import (
    DuplicateRecordError,
    ProblemNotFoundError,
    UserNotFoundError,
)
from dailycode.shared.models import ProgressStatus, Topic
from dailycode.shared.repository import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class ProgressService:
    """Appends attempts and keeps the dependent state consistent.

    One submission updates, in a single unit of work: the progress record,
    the user's lifetime solved counter (first solve only), the topic
    mastery, today's recommendation when the solved problem is its pick,
    and the user's last activity.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        mastery_service: MasteryService | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()
        self._mastery = mastery_service or MasteryService(uow_factory, self._clock)

    async def record_attempt(
        self,
        user_id: UUID,
        problem_id: UUID,
        submission: AttemptSubmission,
    ) -> SubmissionResult:
        """Record one attempt of a user on a problem.

        Args:
            user_id: Submitting user
            problem_id: Active problem being attempted
            submission: Validated attempt payload

        Returns:
            The appended attempt, updated progress and recomputed mastery

        Raises:
            ProblemNotFoundError: If the problem does not exist or is inactive
            UserNotFoundError: If the user does not exist
        """
        now = self._clock.now()
        async with self._uow_factory() as uow:
            problem = await uow.problems.get_active(problem_id)
            if problem is None:
                raise ProblemNotFoundError(problem_id)
            if await uow.users.get(user_id) is None:
                raise UserNotFoundError(user_id)

            progress = await uow.progress.get(user_id, problem_id)
            if progress is None:
                progress = Progress.start(user_id, problem, now)
                attempt, first_solve = progress.record(submission, now)
                try:
                    progress = await uow.progress.add(progress)
                except DuplicateRecordError:
                    # A concurrent first attempt created the record; append to it
                    progress = await uow.progress.get(user_id, problem_id)
                    attempt, first_solve = progress.record(submission, now)
                    progress = await uow.progress.save(progress)
            else:
                attempt, first_solve = progress.record(submission, now)
                progress = await uow.progress.save(progress)

            if first_solve:
                await uow.users.increment_total_solved(user_id)
                logger.info(f"User {user_id} solved problem {problem_id} for the first time")

            mastery = await self._mastery.recompute_in(uow, user_id, progress.topic)

            completed = False
            if attempt.passed:
                completed = await complete_if_selected(uow, user_id, problem_id, now)

            await uow.users.touch(user_id, now)

        return SubmissionResult(
            attempt=attempt,
            progress=progress,
            mastery=mastery,
            first_solve=first_solve,
            recommendation_completed=completed,
        )

    async def get_stats(self, user_id: UUID, timeframe_days: int = 30) -> ProgressStats:
        """Totals, success rate and breakdowns; recent figures cover `timeframe_days`."""
        since = self._clock.now() - timedelta(days=timeframe_days)
        async with self._uow_factory() as uow:
            total_solved = await uow.progress.count_for_user(user_id, status=ProgressStatus.SOLVED)
            total_attempted = await uow.progress.count_for_user(user_id)
            recent_solved = await uow.progress.count_for_user(
                user_id, status=ProgressStatus.SOLVED, solved_since=since
            )
            topic_stats = await uow.progress.summarize(user_id, group_by="topic")
            difficulty_stats = await uow.progress.summarize(user_id, group_by="difficulty")
            daily_activity = await uow.progress.solved_per_day(user_id, since)

        success_rate = (
            round_half_up(total_solved / total_attempted * 100) if total_attempted > 0 else 0
        )
        return ProgressStats(
            total_solved=total_solved,
            total_attempted=total_attempted,
            recent_solved=recent_solved,
            success_rate=success_rate,
            topic_stats=topic_stats,
            difficulty_stats=difficulty_stats,
            daily_activity=daily_activity,
        )

    async def analyze_user_performance(self, user_id: UUID) -> PerformanceAnalysis:
        """Strong and weak topics over the user's most recent progress records."""
        async with self._uow_factory() as uow:
            recent = await uow.progress.list_recent(user_id, ANALYSIS_WINDOW)

        if not recent:
            return PerformanceAnalysis(
                overall_success_rate=0,
                average_attempts=0,
                strong_topics=[],
                weak_topics=[],
                recommendations=["Start with easy array problems"],
            )

        solved = sum(1 for p in recent if p.is_solved)
        success_rate = solved / len(recent) * 100
        average_attempts = sum(p.total_attempts for p in recent) / len(recent)

        per_topic: dict[Topic, list[int]] = defaultdict(lambda: [0, 0])
        for p in recent:
            per_topic[p.topic][0] += 1
            if p.is_solved:
                per_topic[p.topic][1] += 1

        strong = [
            topic for topic, (attempted, solved_count) in per_topic.items()
            if attempted >= STRONG_TOPIC_MIN_ATTEMPTS
            and solved_count / attempted >= STRONG_TOPIC_SOLVE_RATIO
        ]
        weak = [
            topic for topic, (attempted, solved_count) in per_topic.items()
            if attempted >= WEAK_TOPIC_MIN_ATTEMPTS
            and solved_count / attempted < WEAK_TOPIC_SOLVE_RATIO
        ]

        advice = []
        if weak:
            advice.append(f"Focus on {weak[0].value} problems")
        if success_rate < 50:
            advice.append("Practice easier problems to build confidence")
        if average_attempts > 3:
            advice.append("Take time to understand the problem before coding")

        return PerformanceAnalysis(
            overall_success_rate=success_rate,
            average_attempts=average_attempts,
            strong_topics=strong,
            weak_topics=weak,
            recommendations=advice or ["Keep up the good work!"],
        )
