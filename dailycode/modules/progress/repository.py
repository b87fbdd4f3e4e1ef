"""Progress repository for data access operations."""

from datetime import datetime
from typing import Literal, Sequence
from uuid import UUID

from sqlalchemy import Date, case, cast, func, select

from dailycode.modules.progress.interface import (
    DailySolveCount,
    GroupSummary,
    Progress,
)
from dailycode.modules.progress.models import ProgressModel
from dailycode.shared.models import ProgressStatus, Topic
from dailycode.shared.repository import BaseRepository


class ProgressRepository(BaseRepository[ProgressModel]):
    """SQLAlchemy repository for Progress entities."""

    @property
    def _model_class(self) -> type[ProgressModel]:
        return ProgressModel

    async def _get_row(self, user_id: UUID, problem_id: UUID) -> ProgressModel | None:
        result = await self._session.execute(
            select(ProgressModel).where(
                ProgressModel.user_id == user_id,
                ProgressModel.problem_id == problem_id,
            )
        )
        return result.scalar_one_or_none()

    async def get(self, user_id: UUID, problem_id: UUID) -> Progress | None:
        row = await self._get_row(user_id, problem_id)
        return row.to_entity() if row else None

    async def add(self, progress: Progress) -> Progress:
        row = await self._insert_unique(
            ProgressModel.from_entity(progress),
            {"user_id": progress.user_id, "problem_id": progress.problem_id},
        )
        return row.to_entity()

    async def save(self, progress: Progress) -> Progress:
        row = await self._get_row(progress.user_id, progress.problem_id)
        if row is None:
            return await self.add(progress)
        row.apply(progress)
        row = await self._flush(row)
        return row.to_entity()

    async def list_for_topic(self, user_id: UUID, topic: Topic) -> Sequence[Progress]:
        result = await self._session.execute(
            select(ProgressModel)
            .where(ProgressModel.user_id == user_id, ProgressModel.topic == topic.value)
            .order_by(ProgressModel.created_at, ProgressModel.id)
        )
        return [row.to_entity() for row in result.scalars().all()]

    async def list_recent(self, user_id: UUID, limit: int) -> Sequence[Progress]:
        result = await self._session.execute(
            select(ProgressModel)
            .where(ProgressModel.user_id == user_id)
            .order_by(ProgressModel.created_at.desc(), ProgressModel.id)
            .limit(limit)
        )
        return [row.to_entity() for row in result.scalars().all()]

    async def count_for_user(
        self,
        user_id: UUID,
        status: ProgressStatus | None = None,
        solved_since: datetime | None = None,
    ) -> int:
        query = select(func.count(ProgressModel.id)).where(ProgressModel.user_id == user_id)
        if status is not None:
            query = query.where(ProgressModel.status == status.value)
        if solved_since is not None:
            query = query.where(ProgressModel.solved_date >= solved_since)
        result = await self._session.execute(query)
        return result.scalar_one()

    async def distinct_topics(self, user_id: UUID) -> list[Topic]:
        result = await self._session.execute(
            select(ProgressModel.topic)
            .where(ProgressModel.user_id == user_id)
            .group_by(ProgressModel.topic)
            .order_by(func.min(ProgressModel.created_at))
        )
        return [Topic(value) for value in result.scalars().all()]

    async def distinct_users_updated_since(self, since: datetime) -> list[UUID]:
        result = await self._session.execute(
            select(ProgressModel.user_id)
            .where(ProgressModel.updated_at >= since)
            .distinct()
        )
        return list(result.scalars().all())

    async def summarize(
        self,
        user_id: UUID,
        group_by: Literal["topic", "difficulty"],
    ) -> list[GroupSummary]:
        column = ProgressModel.topic if group_by == "topic" else ProgressModel.difficulty
        solved = func.sum(case((ProgressModel.status == ProgressStatus.SOLVED.value, 1), else_=0))
        result = await self._session.execute(
            select(
                column,
                func.count(ProgressModel.id),
                solved,
                func.avg(ProgressModel.total_attempts),
            )
            .where(ProgressModel.user_id == user_id)
            .group_by(column)
            .order_by(column)
        )
        return [
            GroupSummary(
                key=key,
                attempted=attempted,
                solved=int(solved_count or 0),
                average_attempts=float(avg or 0),
            )
            for key, attempted, solved_count, avg in result.all()
        ]

    async def solved_per_day(self, user_id: UUID, since: datetime) -> list[DailySolveCount]:
        day = cast(func.timezone("UTC", ProgressModel.solved_date), Date)
        result = await self._session.execute(
            select(day, func.count(ProgressModel.id))
            .where(
                ProgressModel.user_id == user_id,
                ProgressModel.solved_date >= since,
            )
            .group_by(day)
            .order_by(day)
        )
        return [DailySolveCount(day=d, solved=count) for d, count in result.all()]
