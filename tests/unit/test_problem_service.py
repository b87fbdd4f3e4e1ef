"""Unit tests for the problem catalog service."""

import pytest

from dailycode.modules.problems.interface import Problem, TestCase
from dailycode.modules.problems.service import ProblemService
from dailycode.shared.exceptions import ProblemNotFoundError, ValidationError
from dailycode.shared.models import Difficulty, Topic


@pytest.fixture
def service(uow_factory):
    return ProblemService(uow_factory)


class TestPublicView:
    """Tests for Problem.public_view."""

    def test_unsolved_view_withholds_answers(self):
        problem = Problem(
            title="Two Sum",
            description="...",
            difficulty=Difficulty.EASY,
            topic=Topic.ARRAYS,
            solution="use a map",
            hints=["a", "b", "c"],
            test_cases=[TestCase("1", "1"), TestCase("2", "2", is_hidden=True)],
        )

        view = problem.public_view(solved=False)

        assert view.solution is None
        assert view.hints == ["a", "b"]
        assert [case.input for case in view.test_cases] == ["1"]
        assert problem.solution == "use a map"

    def test_solved_view_keeps_solution(self):
        problem = Problem(
            title="Two Sum",
            description="...",
            difficulty=Difficulty.EASY,
            topic=Topic.ARRAYS,
            solution="use a map",
            hints=["a", "b", "c"],
            test_cases=[TestCase("2", "2", is_hidden=True)],
        )

        view = problem.public_view(solved=True)

        assert view.solution == "use a map"
        assert view.hints == ["a", "b", "c"]
        assert view.test_cases == []


class TestProblemService:
    """Tests for ProblemService."""

    @pytest.mark.asyncio
    async def test_get_for_user_without_progress(self, service, seed):
        user = seed.user()
        problem = seed.problem()

        view = await service.get_for_user(user.id, problem.id)

        assert view.progress is None
        assert view.problem.solution is None

    @pytest.mark.asyncio
    async def test_get_for_user_after_solving(self, service, seed):
        user = seed.user()
        problem = seed.problem()
        seed.progress(user, problem, False, True)

        view = await service.get_for_user(user.id, problem.id)

        assert view.progress.total_attempts == 2
        assert view.problem.solution == "return 42;"

    @pytest.mark.asyncio
    async def test_inactive_problem_is_not_found(self, service, seed):
        user = seed.user()
        problem = seed.problem(is_active=False)

        with pytest.raises(ProblemNotFoundError):
            await service.get_for_user(user.id, problem.id)

    @pytest.mark.asyncio
    async def test_list_by_topic_pages_in_creation_order(self, service, seed):
        problems = [seed.problem(Topic.GRAPHS) for _ in range(5)]
        seed.problem(Topic.TREES)

        page = await service.list_by_topic(Topic.GRAPHS, page=2, page_size=2)

        assert page.total == 5
        assert [p.id for p in page.items] == [problems[2].id, problems[3].id]
        assert page.has_more is True
        assert all(p.solution is None for p in page.items)

    @pytest.mark.asyncio
    async def test_list_last_page(self, service, seed):
        for _ in range(3):
            seed.problem(Topic.GRAPHS, Difficulty.HARD)

        page = await service.list_by_topic(Topic.GRAPHS, Difficulty.HARD, page=2, page_size=2)

        assert len(page.items) == 1
        assert page.has_more is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page,page_size", [(0, 10), (1, 0), (1, 101)])
    async def test_list_rejects_bad_paging(self, service, page, page_size):
        with pytest.raises(ValidationError):
            await service.list_by_topic(Topic.GRAPHS, page=page, page_size=page_size)
