"""User repository for data access operations."""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select, update

from dailycode.modules.user.interface import User
from dailycode.modules.user.models import UserModel
from dailycode.shared.repository import BaseRepository


class UserRepository(BaseRepository[UserModel]):
    """SQLAlchemy repository for User entities."""

    @property
    def _model_class(self) -> type[UserModel]:
        return UserModel

    async def get(self, user_id: UUID) -> User | None:
        row = await self._session.get(UserModel, user_id)
        return row.to_entity() if row else None

    async def add(self, user: User) -> User:
        row = await self._insert_unique(UserModel.from_entity(user), {"id": user.id})
        return row.to_entity()

    async def increment_total_solved(self, user_id: UUID) -> None:
        await self._session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(total_solved=UserModel.total_solved + 1)
        )

    async def update_streaks(self, user_id: UUID, current: int, longest: int) -> None:
        await self._session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(current_streak=current, longest_streak=longest)
        )

    async def touch(self, user_id: UUID, at: datetime) -> None:
        await self._session.execute(
            update(UserModel).where(UserModel.id == user_id).values(last_active=at)
        )

    async def list_active(self, since: datetime | None = None) -> Sequence[User]:
        query = select(UserModel).where(UserModel.is_active.is_(True))
        if since is not None:
            query = query.where(UserModel.last_active >= since)
        result = await self._session.execute(query.order_by(UserModel.created_at))
        return [row.to_entity() for row in result.scalars().all()]

    async def count(self, active_since: datetime | None = None) -> int:
        query = select(func.count(UserModel.id))
        if active_since is not None:
            query = query.where(UserModel.last_active >= active_since)
        result = await self._session.execute(query)
        return result.scalar_one()
