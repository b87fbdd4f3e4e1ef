"""Recommendation Module - One recommended problem per user per day."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Protocol, Sequence
from uuid import UUID, uuid4

from dailycode.shared.constants import (
    MAX_FEEDBACK_RATING,
    MAX_RECOMMENDATION_PRIORITY,
    MIN_FEEDBACK_RATING,
    MIN_RECOMMENDATION_PRIORITY,
)
from dailycode.shared.datetime_utils import utc_now
from dailycode.shared.exceptions import InvalidFeedbackError, ValidationError
from dailycode.shared.models import Difficulty, RecommendationReason, Topic


class SelectionRule(str, Enum):
    """Which topic progression rule produced a choice."""

    NEW_USER = "new_user"
    WEAKEST_TOPIC = "weakest_topic"
    NEW_TOPIC = "new_topic"
    FALLBACK = "fallback"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class TopicChoice:
    """Topic (None means any) and difficulty to draw the next problem from."""

    topic: Topic | None
    difficulty: Difficulty
    rule: SelectionRule


@dataclass(frozen=True)
class RecommendedProblem:
    """A candidate considered for the day."""

    problem_id: UUID
    topic: Topic
    difficulty: Difficulty
    reason: RecommendationReason
    priority: int
    score: float

    def __post_init__(self) -> None:
        if not MIN_RECOMMENDATION_PRIORITY <= self.priority <= MAX_RECOMMENDATION_PRIORITY:
            raise ValidationError(
                "priority",
                f"Must be between {MIN_RECOMMENDATION_PRIORITY} and {MAX_RECOMMENDATION_PRIORITY}",
            )


@dataclass(frozen=True)
class RecommendationFeedback:
    """User feedback on a day's recommendation."""

    difficulty_rating: int | None = None
    helpful: bool | None = None
    comments: str | None = None

    def __post_init__(self) -> None:
        if self.difficulty_rating is not None and not (
            MIN_FEEDBACK_RATING <= self.difficulty_rating <= MAX_FEEDBACK_RATING
        ):
            raise InvalidFeedbackError(
                "difficulty_rating",
                f"Must be between {MIN_FEEDBACK_RATING} and {MAX_FEEDBACK_RATING}",
            )


@dataclass
class DailyRecommendation:
    """The recommendation of one user for one UTC day.

    Created once per (user_id, date) and never replaced; only the
    completion, skip and feedback fields change afterwards.
    """

    user_id: UUID
    date: date
    selected_problem_id: UUID
    recommended_problems: list[RecommendedProblem] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    completed: bool = False
    completed_at: datetime | None = None
    skipped: bool = False
    feedback: RecommendationFeedback | None = None
    created_at: datetime = field(default_factory=utc_now)

    @property
    def reason(self) -> RecommendationReason:
        if self.recommended_problems:
            return self.recommended_problems[0].reason
        return RecommendationReason.DAILY_RECOMMENDATION

    @property
    def state(self) -> str:
        if self.completed:
            return "completed"
        if self.skipped:
            return "skipped"
        return "open"


@dataclass
class BatchResult:
    """Outcome of generating recommendations for many users."""

    day: date
    total: int = 0
    generated: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class DayActivity:
    date: date
    completed: bool
    skipped: bool


@dataclass
class StreakInfo:
    current_streak: int
    longest_streak: int
    recent_activity: list[DayActivity]


class IRecommendationRepository(Protocol):
    """Store operations over daily recommendations."""

    async def get(self, user_id: UUID, day: date) -> DailyRecommendation | None:
        """Get the recommendation of a user for a day."""
        ...

    async def add(self, recommendation: DailyRecommendation) -> DailyRecommendation:
        """Insert a recommendation.

        Raises:
            DuplicateRecordError: If the user already has one for that day
        """
        ...

    async def save(self, recommendation: DailyRecommendation) -> DailyRecommendation:
        """Persist completion, skip and feedback changes."""
        ...

    async def exists(self, user_id: UUID, day: date) -> bool:
        ...

    async def list_between(self, user_id: UUID, start: date, end: date) -> Sequence[DailyRecommendation]:
        """Recommendations with start <= date <= end, newest first."""
        ...

    async def delete_before(self, day: date) -> int:
        """Delete every recommendation dated before `day`; returns the count."""
        ...

    async def count_completed_since(self, day: date) -> int:
        """Count completed recommendations dated on or after `day`."""
        ...
