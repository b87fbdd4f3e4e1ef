"""Mastery service - recomputes and reports topic mastery."""

import logging
from datetime import datetime
from uuid import UUID

from dailycode.modules.mastery.interface import (
    FocusTopic,
    MasteryOverview,
    SweepResult,
    TopicMastery,
)
from dailycode.modules.mastery.scoring import compute_mastery, round_half_up
from dailycode.shared.constants import (
    FOCUS_TOPIC_COUNT,
    MEDIUM_MASTERY_THRESHOLD,
    WEAK_TOPIC_THRESHOLD,
)
from dailycode.shared.datetime_utils import Clock, SystemClock
from dailycode.shared.models import Topic
from dailycode.shared.repository import UnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)


class MasteryService:
    """Keeps TopicMastery documents in line with the progress records."""

    def __init__(self, uow_factory: UnitOfWorkFactory, clock: Clock | None = None) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()

    async def recompute(self, user_id: UUID, topic: Topic) -> TopicMastery:
        """Rebuild and store the mastery document for one user and topic."""
        async with self._uow_factory() as uow:
            return await self.recompute_in(uow, user_id, topic)

    async def recompute_in(self, uow: UnitOfWork, user_id: UUID, topic: Topic) -> TopicMastery:
        """Recompute inside an open unit of work.

        With no progress in the topic the stored document (or a default one)
        is returned unchanged and nothing is written.
        """
        records = await uow.progress.list_for_topic(user_id, topic)
        previous = await uow.mastery.get(user_id, topic)
        if not records:
            return previous or TopicMastery(user_id=user_id, topic=topic)

        mastery = compute_mastery(user_id, topic, records, previous, now=self._clock.now())
        stored = await uow.mastery.upsert(mastery)

        if previous is None or previous.mastery_level != stored.mastery_level:
            logger.info(
                f"Updated topic mastery for user {user_id}, topic {topic.value}: "
                f"{stored.mastery_level}%"
            )
        return stored

    async def list_for_user(self, user_id: UUID) -> list[TopicMastery]:
        async with self._uow_factory() as uow:
            return list(await uow.mastery.list_for_user(user_id))

    async def get_overview(self, user_id: UUID) -> MasteryOverview:
        """Masteries strongest first, their rounded average and up to three focus topics."""
        masteries = sorted(
            await self.list_for_user(user_id),
            key=lambda m: m.mastery_level,
            reverse=True,
        )
        overall = (
            round_half_up(sum(m.mastery_level for m in masteries) / len(masteries))
            if masteries else 0
        )

        weak = sorted(
            (m for m in masteries if m.mastery_level < WEAK_TOPIC_THRESHOLD),
            key=lambda m: m.mastery_level,
        )
        focus = [
            FocusTopic(
                topic=m.topic,
                mastery_level=m.mastery_level,
                recommended_difficulty=m.recommended_difficulty,
                reason=(
                    "Focus on basics"
                    if m.mastery_level < MEDIUM_MASTERY_THRESHOLD
                    else "Practice more problems"
                ),
            )
            for m in weak[:FOCUS_TOPIC_COUNT]
        ]
        return MasteryOverview(overall_mastery=overall, topics=masteries, focus_topics=focus)

    async def recompute_user(self, user_id: UUID) -> list[TopicMastery]:
        """Recompute every topic the user has progress in, in one unit of work."""
        async with self._uow_factory() as uow:
            topics = await uow.progress.distinct_topics(user_id)
            return [await self.recompute_in(uow, user_id, topic) for topic in topics]

    async def recompute_recent(self, since: datetime) -> SweepResult:
        """Recompute every touched topic of users with progress updated since `since`.

        Each user is processed in its own unit of work; a failure is logged
        and counted and the sweep moves on.
        """
        result = SweepResult()
        async with self._uow_factory() as uow:
            user_ids = await uow.progress.distinct_users_updated_since(since)

        for user_id in user_ids:
            try:
                recomputed = await self.recompute_user(user_id)
                result.users += 1
                result.topics_recomputed += len(recomputed)
            except Exception as e:
                logger.exception(f"Mastery sweep failed for user {user_id}")
                result.errors.append(f"{user_id}: {e}")

        logger.info(
            f"Mastery sweep recomputed {result.topics_recomputed} topics "
            f"for {result.users} users"
        )
        return result
