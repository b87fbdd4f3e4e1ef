"""In-memory problem repository (default store and tests)."""

import copy
from typing import TYPE_CHECKING, Sequence
from uuid import UUID

from dailycode.modules.problems.interface import Problem
from dailycode.shared.exceptions import DuplicateRecordError
from dailycode.shared.models import Difficulty, Topic

if TYPE_CHECKING:
    from dailycode.shared.unit_of_work import InMemoryDatabase


class InMemoryProblemRepository:
    """Problem catalog held in a shared dict keyed by problem ID."""

    def __init__(self, db: "InMemoryDatabase") -> None:
        self._problems = db.problems

    def _matching(self, topic: Topic | None, difficulty: Difficulty | None) -> list[Problem]:
        matches = [
            p for p in self._problems.values()
            if p.is_active
            and (topic is None or p.topic == topic)
            and (difficulty is None or p.difficulty == difficulty)
        ]
        return sorted(matches, key=lambda p: (p.created_at, str(p.id)))

    async def get_active(self, problem_id: UUID) -> Problem | None:
        problem = self._problems.get(problem_id)
        if problem is None or not problem.is_active:
            return None
        return copy.deepcopy(problem)

    async def count_active(
        self,
        topic: Topic | None = None,
        difficulty: Difficulty | None = None,
    ) -> int:
        return len(self._matching(topic, difficulty))

    async def find_active(
        self,
        topic: Topic | None = None,
        difficulty: Difficulty | None = None,
        offset: int = 0,
        limit: int = 1,
    ) -> Sequence[Problem]:
        window = self._matching(topic, difficulty)[offset:offset + limit]
        return [copy.deepcopy(p) for p in window]

    async def first_active(self) -> Problem | None:
        problems = await self.find_active(limit=1)
        return problems[0] if problems else None

    async def add(self, problem: Problem) -> Problem:
        if problem.id in self._problems:
            raise DuplicateRecordError("Problem", {"id": problem.id})
        self._problems[problem.id] = copy.deepcopy(problem)
        return copy.deepcopy(problem)
