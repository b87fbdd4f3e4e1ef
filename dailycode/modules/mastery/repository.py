"""Topic mastery repository for data access operations."""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select

from dailycode.modules.mastery.interface import TopicMastery
from dailycode.modules.mastery.models import TopicMasteryModel
from dailycode.shared.exceptions import DuplicateRecordError
from dailycode.shared.models import Topic
from dailycode.shared.repository import BaseRepository


class MasteryRepository(BaseRepository[TopicMasteryModel]):
    """SQLAlchemy repository for TopicMastery entities."""

    @property
    def _model_class(self) -> type[TopicMasteryModel]:
        return TopicMasteryModel

    async def _get_row(self, user_id: UUID, topic: Topic) -> TopicMasteryModel | None:
        result = await self._session.execute(
            select(TopicMasteryModel).where(
                TopicMasteryModel.user_id == user_id,
                TopicMasteryModel.topic == topic.value,
            )
        )
        return result.scalar_one_or_none()

    async def get(self, user_id: UUID, topic: Topic) -> TopicMastery | None:
        row = await self._get_row(user_id, topic)
        return row.to_entity() if row else None

    async def upsert(self, mastery: TopicMastery) -> TopicMastery:
        row = await self._get_row(mastery.user_id, mastery.topic)
        if row is None:
            try:
                row = await self._insert_unique(
                    TopicMasteryModel.from_entity(mastery),
                    {"user_id": mastery.user_id, "topic": mastery.topic.value},
                )
                return row.to_entity()
            except DuplicateRecordError:
                # A concurrent recompute created it first; overwrite theirs
                row = await self._get_row(mastery.user_id, mastery.topic)
        row.apply(mastery)
        row = await self._flush(row)
        return row.to_entity()

    async def list_for_user(self, user_id: UUID) -> Sequence[TopicMastery]:
        result = await self._session.execute(
            select(TopicMasteryModel)
            .where(TopicMasteryModel.user_id == user_id)
            .order_by(TopicMasteryModel.created_at, TopicMasteryModel.id)
        )
        return [row.to_entity() for row in result.scalars().all()]
