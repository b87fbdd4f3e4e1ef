"""User Module - The parts of a user record the recommendation engine reads."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, Sequence
from uuid import UUID, uuid4

from dailycode.shared.datetime_utils import utc_now
from dailycode.shared.models import SkillLevel, Topic


@dataclass
class User:
    """Practice profile of a user.

    Credentials and account management belong to the auth service; only
    the fields the engine reads or maintains are kept here.
    """

    username: str
    email: str
    id: UUID = field(default_factory=uuid4)
    skill_level: SkillLevel = SkillLevel.BEGINNER
    preferences: list[Topic] = field(default_factory=list)
    total_solved: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    is_active: bool = True
    last_active: datetime = field(default_factory=utc_now)
    created_at: datetime = field(default_factory=utc_now)


class IUserRepository(Protocol):
    """Store operations over users."""

    async def get(self, user_id: UUID) -> User | None:
        """Get a user by ID."""
        ...

    async def add(self, user: User) -> User:
        """Insert a user."""
        ...

    async def increment_total_solved(self, user_id: UUID) -> None:
        """Atomically add one to the user's lifetime solved counter."""
        ...

    async def update_streaks(self, user_id: UUID, current: int, longest: int) -> None:
        """Store current and longest streak values."""
        ...

    async def touch(self, user_id: UUID, at: datetime) -> None:
        """Record activity at the given instant."""
        ...

    async def list_active(self, since: datetime | None = None) -> Sequence[User]:
        """Active users, optionally restricted to those seen since `since`."""
        ...

    async def count(self, active_since: datetime | None = None) -> int:
        """Count users, optionally only those seen since `active_since`."""
        ...
