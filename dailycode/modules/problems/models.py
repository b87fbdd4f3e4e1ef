"""SQLAlchemy models for Problems module."""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, Index, String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from dailycode.modules.problems.interface import Example, Problem, TestCase
from dailycode.shared.database import Base
from dailycode.shared.datetime_utils import utc_now
from dailycode.shared.models import Difficulty, Topic


class ProblemModel(Base):
    """Problem database model."""

    __tablename__ = "problems"
    __table_args__ = (
        Index("ix_problems_topic_difficulty", "topic", "difficulty"),
        Index("ix_problems_is_active", "is_active"),
    )

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
        server_default=text("uuid_generate_v4()"),
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    difficulty: Mapped[str] = mapped_column(String(10), nullable=False)
    topic: Mapped[str] = mapped_column(String(30), nullable=False)
    tags: Mapped[list[str]] = mapped_column(
        ARRAY(Text),
        default=list,
        server_default="{}",
    )
    test_cases: Mapped[list[dict]] = mapped_column(JSONB, default=list)
    solution: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    hints: Mapped[list[str]] = mapped_column(
        ARRAY(Text),
        default=list,
        server_default="{}",
    )
    time_complexity: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    space_complexity: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    constraints: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    examples: Mapped[list[dict]] = mapped_column(JSONB, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=text("NOW()"),
    )

    @classmethod
    def from_entity(cls, problem: Problem) -> "ProblemModel":
        """Build a row from a domain Problem."""
        return cls(
            id=problem.id,
            title=problem.title,
            description=problem.description,
            difficulty=problem.difficulty.value,
            topic=problem.topic.value,
            tags=list(problem.tags),
            test_cases=[
                {"input": c.input, "expected_output": c.expected_output, "is_hidden": c.is_hidden}
                for c in problem.test_cases
            ],
            solution=problem.solution,
            hints=list(problem.hints),
            time_complexity=problem.time_complexity,
            space_complexity=problem.space_complexity,
            constraints=problem.constraints,
            examples=[
                {"input": e.input, "output": e.output, "explanation": e.explanation}
                for e in problem.examples
            ],
            is_active=problem.is_active,
            created_at=problem.created_at,
        )

    def to_entity(self) -> Problem:
        """Convert to the domain Problem."""
        return Problem(
            id=self.id,
            title=self.title,
            description=self.description,
            difficulty=Difficulty(self.difficulty),
            topic=Topic(self.topic),
            tags=list(self.tags or []),
            test_cases=[TestCase(**c) for c in self.test_cases or []],
            solution=self.solution,
            hints=list(self.hints or []),
            time_complexity=self.time_complexity,
            space_complexity=self.space_complexity,
            constraints=self.constraints,
            examples=[Example(**e) for e in self.examples or []],
            is_active=self.is_active,
            created_at=self.created_at,
        )
