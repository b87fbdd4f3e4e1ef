"""SQLAlchemy models for users."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, Index, Integer, String, text
from sqlalchemy.dialects.postgresql import ARRAY, UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from dailycode.modules.user.interface import User
from dailycode.shared.database import Base
from dailycode.shared.datetime_utils import utc_now
from dailycode.shared.models import SkillLevel, Topic


class UserModel(Base):
    """User practice profile.

    Maps to the 'users' table shared with the auth service, which owns the
    credential columns.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_last_active", "last_active"),
    )

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
        server_default=text("uuid_generate_v4()"),
    )
    username: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    skill_level: Mapped[str] = mapped_column(
        String(20),
        default=SkillLevel.BEGINNER.value,
        server_default=SkillLevel.BEGINNER.value,
    )
    preferences: Mapped[list[str]] = mapped_column(
        ARRAY(String(30)),
        default=list,
        server_default="{}",
    )

    # Counters maintained by the engine
    total_solved: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    current_streak: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    longest_streak: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")
    last_active: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=text("NOW()"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=text("NOW()"),
    )

    @classmethod
    def from_entity(cls, user: User) -> "UserModel":
        """Build a row from a domain User."""
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            skill_level=user.skill_level.value,
            preferences=[t.value for t in user.preferences],
            total_solved=user.total_solved,
            current_streak=user.current_streak,
            longest_streak=user.longest_streak,
            is_active=user.is_active,
            last_active=user.last_active,
            created_at=user.created_at,
        )

    def to_entity(self) -> User:
        """Convert to the domain User."""
        return User(
            id=self.id,
            username=self.username,
            email=self.email,
            skill_level=SkillLevel(self.skill_level),
            preferences=[Topic(t) for t in self.preferences or []],
            total_solved=self.total_solved,
            current_streak=self.current_streak,
            longest_streak=self.longest_streak,
            is_active=self.is_active,
            last_active=self.last_active,
            created_at=self.created_at,
        )
