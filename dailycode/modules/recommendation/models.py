"""SQLAlchemy models for Recommendation module."""

from datetime import date as date_type, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import JSONB, UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from dailycode.modules.recommendation.interface import (
    DailyRecommendation,
    RecommendationFeedback,
    RecommendedProblem,
)
from dailycode.shared.database import Base
from dailycode.shared.datetime_utils import utc_now
from dailycode.shared.models import Difficulty, RecommendationReason, Topic


class DailyRecommendationModel(Base):
    """Daily recommendation database model.

    The unique constraint on (user_id, date) is what keeps a user at one
    recommendation per day when requests race.
    """

    __tablename__ = "daily_recommendations"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_recommendations_user_date"),
        Index("ix_daily_recommendations_date", "date"),
        Index("ix_daily_recommendations_user_completed", "user_id", "completed"),
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
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    recommended_problems: Mapped[list[dict]] = mapped_column(JSONB, default=list)
    selected_problem_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        ForeignKey("problems.id", ondelete="CASCADE"),
        nullable=False,
    )
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    skipped: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    feedback: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=text("NOW()"),
    )

    @classmethod
    def from_entity(cls, rec: DailyRecommendation) -> "DailyRecommendationModel":
        row = cls(
            id=rec.id,
            user_id=rec.user_id,
            date=rec.date,
            selected_problem_id=rec.selected_problem_id,
            recommended_problems=[
                {
                    "problem_id": str(p.problem_id),
                    "topic": p.topic.value,
                    "difficulty": p.difficulty.value,
                    "reason": p.reason.value,
                    "priority": p.priority,
                    "score": p.score,
                }
                for p in rec.recommended_problems
            ],
            created_at=rec.created_at,
        )
        row.apply(rec)
        return row

    def apply(self, rec: DailyRecommendation) -> None:
        """Copy the mutable fields of a domain recommendation onto this row."""
        self.completed = rec.completed
        self.completed_at = rec.completed_at
        self.skipped = rec.skipped
        self.feedback = (
            {
                "difficulty_rating": rec.feedback.difficulty_rating,
                "helpful": rec.feedback.helpful,
                "comments": rec.feedback.comments,
            }
            if rec.feedback is not None
            else None
        )

    def to_entity(self) -> DailyRecommendation:
        return DailyRecommendation(
            id=self.id,
            user_id=self.user_id,
            date=self.date,
            selected_problem_id=self.selected_problem_id,
            recommended_problems=[
                RecommendedProblem(
                    problem_id=UUID(p["problem_id"]),
                    topic=Topic(p["topic"]),
                    difficulty=Difficulty(p["difficulty"]),
                    reason=RecommendationReason(p["reason"]),
                    priority=p["priority"],
                    score=p["score"],
                )
                for p in self.recommended_problems or []
            ],
            completed=self.completed,
            completed_at=self.completed_at,
            skipped=self.skipped,
            feedback=RecommendationFeedback(**self.feedback) if self.feedback else None,
            created_at=self.created_at,
        )
