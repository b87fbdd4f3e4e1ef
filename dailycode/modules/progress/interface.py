"""Progress Module - Attempt history and derived status per user and problem.

A Progress record is the single source of truth for everything the
mastery model and the statistics endpoints derive. Attempts are appended,
never edited, and the status can only move forward to solved.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Literal, Protocol, Sequence
from uuid import UUID, uuid4

from dailycode.shared.datetime_utils import utc_now
from dailycode.shared.exceptions import InvalidAttemptError
from dailycode.shared.models import (
    AttemptResult,
    Difficulty,
    Language,
    ProgressStatus,
    Topic,
)

if TYPE_CHECKING:
    from dailycode.modules.mastery.interface import TopicMastery
    from dailycode.modules.problems.interface import Problem


@dataclass(frozen=True)
class Attempt:
    """One recorded submission. Immutable once appended."""

    attempt_number: int
    code: str
    language: Language
    result: AttemptResult
    time_taken: float
    test_cases_passed: int
    total_test_cases: int
    timestamp: datetime

    @property
    def passed(self) -> bool:
        return self.result == AttemptResult.PASSED


@dataclass(frozen=True)
class AttemptSubmission:
    """Attempt as supplied by the caller, validated on construction.

    Grading happens elsewhere; the caller reports how many test cases
    passed. The attempt passes if and only if every test case passed.
    A non-passing outcome may be qualified with `result` (partial,
    timeout, runtime-error); it defaults to failed.
    """

    code: str
    time_taken: float
    test_cases_passed: int
    total_test_cases: int
    language: Language = Language.JAVASCRIPT
    result: AttemptResult | None = None

    def __post_init__(self) -> None:
        if not self.code or not self.code.strip():
            raise InvalidAttemptError("code", "Code is required")
        if self.time_taken is None or not math.isfinite(self.time_taken) or self.time_taken <= 0:
            raise InvalidAttemptError("time_taken", "Time taken must be a positive number of minutes")
        if not isinstance(self.language, Language):
            raise InvalidAttemptError("language", f"Unsupported language {self.language!r}")
        if self.total_test_cases < 1:
            raise InvalidAttemptError("total_test_cases", "At least one test case is required")
        if not 0 <= self.test_cases_passed <= self.total_test_cases:
            raise InvalidAttemptError(
                "test_cases_passed",
                f"Must be between 0 and {self.total_test_cases}",
            )
        if self.result == AttemptResult.PASSED and not self.all_passed:
            raise InvalidAttemptError("result", "A passing result requires every test case to pass")
        if self.result not in (None, AttemptResult.PASSED) and self.all_passed:
            raise InvalidAttemptError("result", "Every test case passed but the result is not passing")

    @property
    def all_passed(self) -> bool:
        return self.test_cases_passed == self.total_test_cases

    @property
    def outcome(self) -> AttemptResult:
        """Grading outcome derived from the test case counts."""
        if self.all_passed:
            return AttemptResult.PASSED
        return self.result or AttemptResult.FAILED


@dataclass
class Progress:
    """Attempt history of one user on one problem.

    `topic` and `difficulty` are copied from the problem when the record is
    created and never follow later edits of the problem.
    """

    user_id: UUID
    problem_id: UUID
    topic: Topic
    difficulty: Difficulty
    id: UUID = field(default_factory=uuid4)
    attempts: list[Attempt] = field(default_factory=list)
    status: ProgressStatus = ProgressStatus.NOT_ATTEMPTED
    first_attempt_date: datetime | None = None
    solved_date: datetime | None = None
    total_attempts: int = 0
    best_time: float | None = None
    hints_used: int = 0
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def start(cls, user_id: UUID, problem: "Problem", at: datetime) -> "Progress":
        """Empty record for a user's first attempt on `problem`."""
        return cls(
            user_id=user_id,
            problem_id=problem.id,
            topic=problem.topic,
            difficulty=problem.difficulty,
            created_at=at,
            updated_at=at,
        )

    @property
    def is_solved(self) -> bool:
        return self.status == ProgressStatus.SOLVED

    def record(self, submission: AttemptSubmission, at: datetime) -> tuple[Attempt, bool]:
        """Append an attempt and update the derived fields.

        Returns:
            The appended attempt and whether this attempt was the first solve
        """
        attempt = Attempt(
            attempt_number=len(self.attempts) + 1,
            code=submission.code,
            language=submission.language,
            result=submission.outcome,
            time_taken=submission.time_taken,
            test_cases_passed=submission.test_cases_passed,
            total_test_cases=submission.total_test_cases,
            timestamp=at,
        )
        self.attempts.append(attempt)
        self.total_attempts = len(self.attempts)
        if self.first_attempt_date is None:
            self.first_attempt_date = at

        first_solve = False
        if attempt.passed:
            if self.best_time is None or attempt.time_taken < self.best_time:
                self.best_time = attempt.time_taken
            if self.solved_date is None:
                self.solved_date = at
                first_solve = True
            self.status = ProgressStatus.SOLVED
        elif not self.is_solved:
            self.status = ProgressStatus.ATTEMPTED

        self.updated_at = at
        return attempt, first_solve


@dataclass
class GroupSummary:
    """Aggregate over a user's progress records sharing a topic or difficulty."""

    key: str
    attempted: int
    solved: int
    average_attempts: float


@dataclass
class DailySolveCount:
    day: date
    solved: int


@dataclass
class SubmissionResult:
    """Everything that changed because of one submission."""

    attempt: Attempt
    progress: Progress
    mastery: "TopicMastery"
    first_solve: bool
    recommendation_completed: bool = False


@dataclass
class ProgressStats:
    """Progress statistics over a trailing window of days."""

    total_solved: int
    total_attempted: int
    recent_solved: int
    success_rate: int
    topic_stats: list[GroupSummary]
    difficulty_stats: list[GroupSummary]
    daily_activity: list[DailySolveCount]


@dataclass
class PerformanceAnalysis:
    """Strengths and weaknesses over a user's most recent progress records."""

    overall_success_rate: float
    average_attempts: float
    strong_topics: list[Topic]
    weak_topics: list[Topic]
    recommendations: list[str]


class IProgressRepository(Protocol):
    """Store operations over progress records."""

    async def get(self, user_id: UUID, problem_id: UUID) -> Progress | None:
        """Get the record for a user and problem."""
        ...

    async def add(self, progress: Progress) -> Progress:
        """Insert a new record.

        Raises:
            DuplicateRecordError: If the user already has a record for the problem
        """
        ...

    async def save(self, progress: Progress) -> Progress:
        """Overwrite an existing record."""
        ...

    async def list_for_topic(self, user_id: UUID, topic: Topic) -> Sequence[Progress]:
        """All of a user's records in a topic, oldest first."""
        ...

    async def list_recent(self, user_id: UUID, limit: int) -> Sequence[Progress]:
        """A user's most recently created records, newest first."""
        ...

    async def count_for_user(
        self,
        user_id: UUID,
        status: ProgressStatus | None = None,
        solved_since: datetime | None = None,
    ) -> int:
        """Count a user's records, optionally by status or solve time."""
        ...

    async def distinct_topics(self, user_id: UUID) -> list[Topic]:
        """Topics the user has at least one record in."""
        ...

    async def distinct_users_updated_since(self, since: datetime) -> list[UUID]:
        """Users with a record updated at or after `since`."""
        ...

    async def summarize(
        self,
        user_id: UUID,
        group_by: Literal["topic", "difficulty"],
    ) -> list[GroupSummary]:
        """Attempted, solved and average attempts grouped by topic or difficulty."""
        ...

    async def solved_per_day(self, user_id: UUID, since: datetime) -> list[DailySolveCount]:
        """Number of first solves per UTC day since `since`, oldest first."""
        ...
