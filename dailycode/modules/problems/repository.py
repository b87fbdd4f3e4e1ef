"""Problem repository for data access operations.

This module implements the repository pattern for the problem catalog,
separating data access logic from the selection logic.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.sql import Select

from dailycode.modules.problems.interface import Problem
from dailycode.modules.problems.models import ProblemModel
from dailycode.shared.models import Difficulty, Topic
from dailycode.shared.repository import BaseRepository


class ProblemRepository(BaseRepository[ProblemModel]):
    """SQLAlchemy repository for Problem entities."""

    @property
    def _model_class(self) -> type[ProblemModel]:
        return ProblemModel

    @staticmethod
    def _filtered(query: Select, topic: Topic | None, difficulty: Difficulty | None) -> Select:
        query = query.where(ProblemModel.is_active.is_(True))
        if topic is not None:
            query = query.where(ProblemModel.topic == topic.value)
        if difficulty is not None:
            query = query.where(ProblemModel.difficulty == difficulty.value)
        return query

    async def get_active(self, problem_id: UUID) -> Problem | None:
        result = await self._session.execute(
            select(ProblemModel).where(
                ProblemModel.id == problem_id,
                ProblemModel.is_active.is_(True),
            )
        )
        row = result.scalar_one_or_none()
        return row.to_entity() if row else None

    async def count_active(
        self,
        topic: Topic | None = None,
        difficulty: Difficulty | None = None,
    ) -> int:
        result = await self._session.execute(
            self._filtered(select(func.count(ProblemModel.id)), topic, difficulty)
        )
        return result.scalar_one()

    async def find_active(
        self,
        topic: Topic | None = None,
        difficulty: Difficulty | None = None,
        offset: int = 0,
        limit: int = 1,
    ) -> Sequence[Problem]:
        result = await self._session.execute(
            self._filtered(select(ProblemModel), topic, difficulty)
            .order_by(ProblemModel.created_at, ProblemModel.id)
            .offset(offset)
            .limit(limit)
        )
        return [row.to_entity() for row in result.scalars().all()]

    async def first_active(self) -> Problem | None:
        problems = await self.find_active(limit=1)
        return problems[0] if problems else None

    async def add(self, problem: Problem) -> Problem:
        row = await self._insert_unique(ProblemModel.from_entity(problem), {"id": problem.id})
        return row.to_entity()
