"""SQLAlchemy models for Progress module."""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import JSONB, UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from dailycode.modules.progress.interface import Attempt, Progress
from dailycode.shared.database import Base
from dailycode.shared.datetime_utils import datetime_to_iso, ensure_utc, utc_now
from dailycode.shared.models import (
    AttemptResult,
    Difficulty,
    Language,
    ProgressStatus,
    Topic,
)


def _attempt_to_json(attempt: Attempt) -> dict:
    return {
        "attempt_number": attempt.attempt_number,
        "code": attempt.code,
        "language": attempt.language.value,
        "result": attempt.result.value,
        "time_taken": attempt.time_taken,
        "test_cases_passed": attempt.test_cases_passed,
        "total_test_cases": attempt.total_test_cases,
        "timestamp": datetime_to_iso(attempt.timestamp),
    }


def _attempt_from_json(data: dict) -> Attempt:
    return Attempt(
        attempt_number=data["attempt_number"],
        code=data["code"],
        language=Language(data["language"]),
        result=AttemptResult(data["result"]),
        time_taken=data["time_taken"],
        test_cases_passed=data["test_cases_passed"],
        total_test_cases=data["total_test_cases"],
        timestamp=ensure_utc(datetime.fromisoformat(data["timestamp"])),
    )


class ProgressModel(Base):
    """User progress on one problem.

    The attempt sequence is stored as a JSONB array in insertion order.
    """

    __tablename__ = "user_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "problem_id", name="uq_user_progress_user_problem"),
        Index("ix_user_progress_user_status", "user_id", "status"),
        Index("ix_user_progress_user_topic_difficulty", "user_id", "topic", "difficulty"),
        Index("ix_user_progress_user_solved_date", "user_id", "solved_date"),
        Index("ix_user_progress_updated_at", "updated_at"),
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
    problem_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        ForeignKey("problems.id", ondelete="CASCADE"),
        nullable=False,
    )
    attempts: Mapped[list[dict]] = mapped_column(JSONB, default=list)
    status: Mapped[str] = mapped_column(
        String(20),
        default=ProgressStatus.NOT_ATTEMPTED.value,
        nullable=False,
    )
    difficulty: Mapped[str] = mapped_column(String(10), nullable=False)
    topic: Mapped[str] = mapped_column(String(30), nullable=False)
    first_attempt_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    solved_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    total_attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    best_time: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    hints_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=text("NOW()"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=text("NOW()"),
    )

    @classmethod
    def from_entity(cls, progress: Progress) -> "ProgressModel":
        """Build a row from a domain Progress."""
        row = cls(id=progress.id, user_id=progress.user_id, problem_id=progress.problem_id)
        row.apply(progress)
        return row

    def apply(self, progress: Progress) -> None:
        """Copy the mutable state of a domain Progress onto this row."""
        self.attempts = [_attempt_to_json(a) for a in progress.attempts]
        self.status = progress.status.value
        self.difficulty = progress.difficulty.value
        self.topic = progress.topic.value
        self.first_attempt_date = progress.first_attempt_date
        self.solved_date = progress.solved_date
        self.total_attempts = len(progress.attempts)
        self.best_time = progress.best_time
        self.hints_used = progress.hints_used
        self.created_at = progress.created_at
        self.updated_at = progress.updated_at

    def to_entity(self) -> Progress:
        """Convert to the domain Progress."""
        return Progress(
            id=self.id,
            user_id=self.user_id,
            problem_id=self.problem_id,
            topic=Topic(self.topic),
            difficulty=Difficulty(self.difficulty),
            attempts=[_attempt_from_json(a) for a in self.attempts or []],
            status=ProgressStatus(self.status),
            first_attempt_date=self.first_attempt_date,
            solved_date=self.solved_date,
            total_attempts=self.total_attempts,
            best_time=self.best_time,
            hints_used=self.hints_used,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
