"""SQLAlchemy models for Mastery module."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import JSONB, UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from dailycode.modules.mastery.interface import TopicMastery
from dailycode.shared.database import Base
from dailycode.shared.datetime_utils import utc_now
from dailycode.shared.models import Difficulty, Topic


class TopicMasteryModel(Base):
    """Topic mastery database model."""

    __tablename__ = "topic_mastery"
    __table_args__ = (
        UniqueConstraint("user_id", "topic", name="uq_topic_mastery_user_topic"),
        Index("ix_topic_mastery_user_level", "user_id", "mastery_level"),
        Index("ix_topic_mastery_last_updated", "last_updated"),
    )

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
        server_default=text("uuid_generate_v4()"),
    )
    user_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    topic: Mapped[str] = mapped_column(String(30), nullable=False)
    problems_attempted: Mapped[dict] = mapped_column(JSONB, default=dict)
    problems_solved: Mapped[dict] = mapped_column(JSONB, default=dict)
    success_rates: Mapped[dict] = mapped_column(JSONB, default=dict)
    average_attempts: Mapped[dict] = mapped_column(JSONB, default=dict)
    mastery_level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    recommended_difficulty: Mapped[str] = mapped_column(
        String(10),
        default=Difficulty.EASY.value,
        nullable=False,
    )
    last_updated: Mapped[datetime] = mapped_column(
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
    def from_entity(cls, mastery: TopicMastery) -> "TopicMasteryModel":
        row = cls(id=mastery.id, user_id=mastery.user_id, topic=mastery.topic.value)
        row.apply(mastery)
        return row

    def apply(self, mastery: TopicMastery) -> None:
        """Overwrite every derived column from a domain TopicMastery."""
        self.problems_attempted = dict(mastery.problems_attempted)
        self.problems_solved = dict(mastery.problems_solved)
        self.success_rates = dict(mastery.success_rates)
        self.average_attempts = dict(mastery.average_attempts)
        self.mastery_level = mastery.mastery_level
        self.recommended_difficulty = mastery.recommended_difficulty.value
        self.last_updated = mastery.last_updated

    def to_entity(self) -> TopicMastery:
        return TopicMastery(
            id=self.id,
            user_id=self.user_id,
            topic=Topic(self.topic),
            problems_attempted=dict(self.problems_attempted or {}),
            problems_solved=dict(self.problems_solved or {}),
            success_rates=dict(self.success_rates or {}),
            average_attempts=dict(self.average_attempts or {}),
            mastery_level=self.mastery_level,
            recommended_difficulty=Difficulty(self.recommended_difficulty),
            last_updated=self.last_updated,
        )
