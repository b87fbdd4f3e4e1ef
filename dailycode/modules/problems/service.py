"""Problem catalog reads as seen by one user."""

import logging
from dataclasses import dataclass
from uuid import UUID

from dailycode.modules.problems.interface import Problem
from dailycode.modules.progress.interface import Progress
from dailycode.shared.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from dailycode.shared.exceptions import ProblemNotFoundError, ValidationError
from dailycode.shared.models import Difficulty, Topic
from dailycode.shared.repository import UnitOfWorkFactory

logger = logging.getLogger(__name__)


@dataclass
class ProblemView:
    """A problem filtered for a user, with their progress on it if any."""

    problem: Problem
    progress: Progress | None


@dataclass
class ProblemPage:
    items: list[Problem]
    total: int
    page: int
    page_size: int

    @property
    def has_more(self) -> bool:
        return self.page * self.page_size < self.total


class ProblemService:
    """Serves active problems with solution and hidden data withheld."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def get_for_user(self, user_id: UUID, problem_id: UUID) -> ProblemView:
        """Public view of an active problem plus the user's progress on it.

        Raises:
            ProblemNotFoundError: If the problem does not exist or is inactive
        """
        async with self._uow_factory() as uow:
            problem = await uow.problems.get_active(problem_id)
            if problem is None:
                raise ProblemNotFoundError(problem_id)
            progress = await uow.progress.get(user_id, problem_id)

        solved = progress is not None and progress.is_solved
        return ProblemView(problem=problem.public_view(solved), progress=progress)

    async def list_by_topic(
        self,
        topic: Topic,
        difficulty: Difficulty | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ProblemPage:
        """One page of active problems in a topic, in creation order.

        Listed problems never carry their solution, hints beyond the
        visible ones, or hidden test cases.
        """
        if page < 1:
            raise ValidationError("page", "Must be at least 1")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValidationError("limit", f"Must be between 1 and {MAX_PAGE_SIZE}")

        async with self._uow_factory() as uow:
            total = await uow.problems.count_active(topic=topic, difficulty=difficulty)
            found = await uow.problems.find_active(
                topic=topic,
                difficulty=difficulty,
                offset=(page - 1) * page_size,
                limit=page_size,
            )

        return ProblemPage(
            items=[problem.public_view(solved=False) for problem in found],
            total=total,
            page=page,
            page_size=page_size,
        )
