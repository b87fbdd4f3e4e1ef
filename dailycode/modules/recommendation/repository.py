"""Daily recommendation repository for data access operations."""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select

from dailycode.modules.recommendation.interface import DailyRecommendation
from dailycode.modules.recommendation.models import DailyRecommendationModel
from dailycode.shared.exceptions import RecommendationNotFoundError
from dailycode.shared.repository import BaseRepository


class RecommendationRepository(BaseRepository[DailyRecommendationModel]):
    """SQLAlchemy repository for DailyRecommendation entities."""

    @property
    def _model_class(self) -> type[DailyRecommendationModel]:
        return DailyRecommendationModel

    async def _get_row(self, user_id: UUID, day: date) -> DailyRecommendationModel | None:
        result = await self._session.execute(
            select(DailyRecommendationModel).where(
                DailyRecommendationModel.user_id == user_id,
                DailyRecommendationModel.date == day,
            )
        )
        return result.scalar_one_or_none()

    async def get(self, user_id: UUID, day: date) -> DailyRecommendation | None:
        row = await self._get_row(user_id, day)
        return row.to_entity() if row else None

    async def add(self, recommendation: DailyRecommendation) -> DailyRecommendation:
        row = await self._insert_unique(
            DailyRecommendationModel.from_entity(recommendation),
            {"user_id": recommendation.user_id, "date": recommendation.date},
        )
        return row.to_entity()

    async def save(self, recommendation: DailyRecommendation) -> DailyRecommendation:
        row = await self._get_row(recommendation.user_id, recommendation.date)
        if row is None:
            raise RecommendationNotFoundError(recommendation.user_id, recommendation.date)
        row.apply(recommendation)
        row = await self._flush(row)
        return row.to_entity()

    async def exists(self, user_id: UUID, day: date) -> bool:
        result = await self._session.execute(
            select(func.count(DailyRecommendationModel.id)).where(
                DailyRecommendationModel.user_id == user_id,
                DailyRecommendationModel.date == day,
            )
        )
        return result.scalar_one() > 0

    async def list_between(self, user_id: UUID, start: date, end: date) -> Sequence[DailyRecommendation]:
        result = await self._session.execute(
            select(DailyRecommendationModel)
            .where(
                DailyRecommendationModel.user_id == user_id,
                DailyRecommendationModel.date >= start,
                DailyRecommendationModel.date <= end,
            )
            .order_by(DailyRecommendationModel.date.desc())
        )
        return [row.to_entity() for row in result.scalars().all()]

    async def delete_before(self, day: date) -> int:
        result = await self._session.execute(
            delete(DailyRecommendationModel).where(DailyRecommendationModel.date < day)
        )
        return result.rowcount or 0

    async def count_completed_since(self, day: date) -> int:
        result = await self._session.execute(
            select(func.count(DailyRecommendationModel.id)).where(
                DailyRecommendationModel.date >= day,
                DailyRecommendationModel.completed.is_(True),
            )
        )
        return result.scalar_one()
