"""In-memory user repository (default store and tests)."""

import copy
import dataclasses
from datetime import datetime
from typing import TYPE_CHECKING, Sequence
from uuid import UUID

from dailycode.modules.user.interface import User
from dailycode.shared.exceptions import DuplicateRecordError

if TYPE_CHECKING:
    from dailycode.shared.unit_of_work import InMemoryDatabase


class InMemoryUserRepository:
    """Users held in a shared dict keyed by user ID."""

    def __init__(self, db: "InMemoryDatabase") -> None:
        self._users = db.users

    async def get(self, user_id: UUID) -> User | None:
        user = self._users.get(user_id)
        return copy.deepcopy(user) if user else None

    async def add(self, user: User) -> User:
        if user.id in self._users:
            raise DuplicateRecordError("User", {"id": user.id})
        self._users[user.id] = copy.deepcopy(user)
        return copy.deepcopy(user)

    def _replace(self, user_id: UUID, **changes) -> None:
        # stored users are swapped, never mutated, so rollback can restore them
        user = self._users.get(user_id)
        if user is not None:
            self._users[user_id] = dataclasses.replace(user, **changes)

    async def increment_total_solved(self, user_id: UUID) -> None:
        user = self._users.get(user_id)
        if user is not None:
            self._replace(user_id, total_solved=user.total_solved + 1)

    async def update_streaks(self, user_id: UUID, current: int, longest: int) -> None:
        self._replace(user_id, current_streak=current, longest_streak=longest)

    async def touch(self, user_id: UUID, at: datetime) -> None:
        self._replace(user_id, last_active=at)

    async def list_active(self, since: datetime | None = None) -> Sequence[User]:
        users = [
            u for u in self._users.values()
            if u.is_active and (since is None or u.last_active >= since)
        ]
        users.sort(key=lambda u: u.created_at)
        return [copy.deepcopy(u) for u in users]

    async def count(self, active_since: datetime | None = None) -> int:
        return sum(
            1 for u in self._users.values()
            if active_since is None or u.last_active >= active_since
        )
