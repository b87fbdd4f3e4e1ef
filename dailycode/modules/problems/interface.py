"""Problems Module - Read-only problem catalog used by the recommendation engine."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Protocol, Sequence
from uuid import UUID, uuid4

from dailycode.shared.constants import VISIBLE_HINTS_UNSOLVED
from dailycode.shared.datetime_utils import utc_now
from dailycode.shared.models import Difficulty, Topic


@dataclass(frozen=True)
class TestCase:
    """Input/expected output pair; hidden cases are never shown to users."""

    __test__ = False  # not a pytest class

    input: str
    expected_output: str
    is_hidden: bool = False


@dataclass(frozen=True)
class Example:
    """Worked example shown in the problem statement."""

    input: str
    output: str
    explanation: str | None = None


@dataclass
class Problem:
    """A practice problem."""

    title: str
    description: str
    difficulty: Difficulty
    topic: Topic
    id: UUID = field(default_factory=uuid4)
    tags: list[str] = field(default_factory=list)
    test_cases: list[TestCase] = field(default_factory=list)
    solution: str | None = None
    hints: list[str] = field(default_factory=list)
    time_complexity: str | None = None
    space_complexity: str | None = None
    constraints: str | None = None
    examples: list[Example] = field(default_factory=list)
    is_active: bool = True
    created_at: datetime = field(default_factory=utc_now)

    def public_view(self, solved: bool) -> "Problem":
        """Copy of the problem as a user may see it.

        Until the user has solved it, the solution is withheld, only the
        first two hints are kept and hidden test cases are dropped.
        """
        visible_cases = [case for case in self.test_cases if not case.is_hidden]
        if solved:
            return replace(self, test_cases=visible_cases)
        return replace(
            self,
            solution=None,
            hints=self.hints[:VISIBLE_HINTS_UNSOLVED],
            test_cases=visible_cases,
        )


class IProblemRepository(Protocol):
    """Store operations over the problem catalog.

    Every lookup ignores inactive problems.
    """

    async def get_active(self, problem_id: UUID) -> Problem | None:
        """Get an active problem by ID."""
        ...

    async def count_active(
        self,
        topic: Topic | None = None,
        difficulty: Difficulty | None = None,
    ) -> int:
        """Count active problems matching the optional filters."""
        ...

    async def find_active(
        self,
        topic: Topic | None = None,
        difficulty: Difficulty | None = None,
        offset: int = 0,
        limit: int = 1,
    ) -> Sequence[Problem]:
        """Active problems matching the filters, in stable creation order."""
        ...

    async def first_active(self) -> Problem | None:
        """Any single active problem, ignoring filters."""
        ...

    async def add(self, problem: Problem) -> Problem:
        """Insert a problem (seeding and tests; admin CRUD lives elsewhere)."""
        ...
