"""Unit tests for the daily recommendation service."""

from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest

from dailycode.modules.recommendation.interface import DailyRecommendation, RecommendationFeedback
from dailycode.modules.recommendation.service import RecommendationService
from dailycode.shared.exceptions import (
    DuplicateRecordError,
    InvalidFeedbackError,
    NoActiveProblemsError,
    RecommendationAlreadyClosedError,
    RecommendationNotFoundError,
    UserNotFoundError,
)
from dailycode.shared.models import Difficulty, RecommendationReason, SkillLevel, Topic
from dailycode.shared.unit_of_work import InMemoryUnitOfWork


@pytest.fixture
def service(uow_factory, clock, rng):
    return RecommendationService(uow_factory, clock=clock, rng=rng)


class TestGetOrCreateDaily:
    """Tests for RecommendationService.get_or_create_daily."""

    @pytest.mark.asyncio
    async def test_new_user_gets_easy_arrays(self, service, seed, clock):
        user = seed.user()
        arrays = seed.problem(Topic.ARRAYS, Difficulty.EASY)
        seed.problem(Topic.ARRAYS, Difficulty.MEDIUM)
        seed.problem(Topic.STRINGS, Difficulty.EASY)

        rec = await service.get_or_create_daily(user.id)

        assert rec.date == clock.today()
        assert rec.selected_problem_id == arrays.id
        assert rec.completed is False
        assert rec.skipped is False
        assert rec.reason == RecommendationReason.DAILY_RECOMMENDATION
        candidate = rec.recommended_problems[0]
        assert candidate.problem_id == arrays.id
        assert candidate.priority == 1
        assert candidate.score == 100

    @pytest.mark.asyncio
    async def test_same_day_is_idempotent(self, service, seed, memory_db):
        user = seed.user()
        for _ in range(5):
            seed.problem(Topic.ARRAYS, Difficulty.EASY)

        first = await service.get_or_create_daily(user.id)
        seed.problem(Topic.ARRAYS, Difficulty.EASY)
        second = await service.get_or_create_daily(user.id)

        assert second.id == first.id
        assert second.selected_problem_id == first.selected_problem_id
        assert len(memory_db.recommendations) == 1

    @pytest.mark.asyncio
    async def test_any_instant_of_the_day_maps_to_it(self, service, seed, clock):
        user = seed.user()
        seed.problem()

        morning = await service.get_or_create_daily(user.id, clock.now().replace(hour=0, minute=1))
        night = await service.get_or_create_daily(user.id, clock.now().replace(hour=23, minute=59))

        assert morning.id == night.id

    @pytest.mark.asyncio
    async def test_weakest_topic_is_recommended(self, service, seed):
        user = seed.user()
        seed.progress(user, seed.problem(Topic.ARRAYS, Difficulty.EASY), True)
        seed.progress(user, seed.problem(Topic.STRINGS, Difficulty.EASY), False)
        seed.mastery(user, Topic.ARRAYS, 80)
        seed.mastery(user, Topic.STRINGS, 35)
        strings_medium = seed.problem(Topic.STRINGS, Difficulty.MEDIUM)

        rec = await service.get_or_create_daily(user.id)

        assert rec.selected_problem_id == strings_medium.id

    @pytest.mark.asyncio
    async def test_falls_back_when_nothing_matches(self, service, seed):
        user = seed.user(skill_level=SkillLevel.ADVANCED)
        only = seed.problem(Topic.GRAPHS, Difficulty.HARD)

        rec = await service.get_or_create_daily(user.id)

        assert rec.selected_problem_id == only.id

    @pytest.mark.asyncio
    async def test_unknown_user(self, service, seed, sample_user_id, memory_db):
        seed.problem()

        with pytest.raises(UserNotFoundError):
            await service.get_or_create_daily(sample_user_id)

        assert memory_db.recommendations == {}

    @pytest.mark.asyncio
    async def test_empty_catalog(self, service, seed, memory_db):
        user = seed.user()
        seed.problem(is_active=False)

        with pytest.raises(NoActiveProblemsError):
            await service.get_or_create_daily(user.id)

        assert memory_db.recommendations == {}

    @pytest.mark.asyncio
    async def test_degrades_when_personalization_fails(self, seed, memory_db, clock, rng):
        user = seed.user()
        seed.progress(user, seed.problem(Topic.GRAPHS, Difficulty.EASY), False)
        seed.mastery(user, Topic.GRAPHS, 10)
        arrays = seed.problem(Topic.ARRAYS, Difficulty.EASY)

        def broken_factory():
            uow = InMemoryUnitOfWork(memory_db)
            uow.mastery.list_for_user = AsyncMock(side_effect=RuntimeError("mastery unavailable"))
            return uow

        service = RecommendationService(broken_factory, clock=clock, rng=rng)

        rec = await service.get_or_create_daily(user.id)

        assert rec.selected_problem_id == arrays.id

    @pytest.mark.asyncio
    async def test_concurrent_creation_returns_winner(self, seed, memory_db, clock, rng):
        user = seed.user()
        problem = seed.problem()
        winner = DailyRecommendation(user_id=user.id, date=clock.today(), selected_problem_id=problem.id)

        def racing_factory():
            uow = InMemoryUnitOfWork(memory_db)

            async def add(rec):
                # Another request commits first
                memory_db.recommendations[(rec.user_id, rec.date)] = winner
                raise DuplicateRecordError("DailyRecommendation", {"user_id": rec.user_id, "date": rec.date})

            uow.recommendations.add = add
            return uow

        service = RecommendationService(racing_factory, clock=clock, rng=rng)

        rec = await service.get_or_create_daily(user.id)

        assert rec.id == winner.id
        assert len(memory_db.recommendations) == 1

    @pytest.mark.asyncio
    async def test_get_daily_does_not_create(self, service, seed, memory_db):
        user = seed.user()
        seed.problem()

        assert await service.get_daily(user.id) is None
        assert memory_db.recommendations == {}


class TestCompleteSkipFeedback:
    """Tests for the state changes of a day's recommendation."""

    @pytest.mark.asyncio
    async def test_complete(self, service, seed, clock):
        user = seed.user()
        seed.recommendation(user, clock.today())

        rec = await service.complete_today(user.id)

        assert rec.completed is True
        assert rec.completed_at == clock.now()
        assert rec.state == "completed"

    @pytest.mark.asyncio
    async def test_complete_twice_is_a_noop(self, service, seed, clock):
        user = seed.user()
        seed.recommendation(user, clock.today())

        first = await service.complete_today(user.id)
        clock.advance(minutes=30)
        second = await service.complete_today(user.id)

        assert second.completed_at == first.completed_at

    @pytest.mark.asyncio
    async def test_complete_skipped_is_rejected(self, service, seed, clock):
        user = seed.user()
        seed.recommendation(user, clock.today(), skipped=True)

        with pytest.raises(RecommendationAlreadyClosedError):
            await service.complete_today(user.id)

    @pytest.mark.asyncio
    async def test_skip(self, service, seed, clock, memory_db):
        user = seed.user()
        seed.recommendation(user, clock.today())

        rec = await service.skip_today(user.id)
        again = await service.skip_today(user.id)

        assert rec.skipped is True
        assert again.skipped is True
        assert memory_db.recommendations[(user.id, clock.today())].completed is False

    @pytest.mark.asyncio
    async def test_skip_completed_is_rejected(self, service, seed, clock):
        user = seed.user()
        seed.recommendation(user, clock.today(), completed=True)

        with pytest.raises(RecommendationAlreadyClosedError):
            await service.skip_today(user.id)

    @pytest.mark.asyncio
    async def test_missing_recommendation(self, service, seed):
        user = seed.user()

        with pytest.raises(RecommendationNotFoundError):
            await service.complete_today(user.id)
        with pytest.raises(RecommendationNotFoundError):
            await service.skip_today(user.id)

    @pytest.mark.asyncio
    async def test_feedback_replaces_earlier_feedback(self, service, seed, clock, memory_db):
        user = seed.user()
        seed.recommendation(user, clock.today())

        await service.submit_feedback(user.id, RecommendationFeedback(difficulty_rating=2, helpful=False))
        rec = await service.submit_feedback(
            user.id, RecommendationFeedback(difficulty_rating=4, helpful=True, comments="Nice one")
        )

        assert rec.feedback == RecommendationFeedback(difficulty_rating=4, helpful=True, comments="Nice one")
        assert memory_db.recommendations[(user.id, clock.today())].feedback.difficulty_rating == 4

    @pytest.mark.parametrize("rating", [0, 6])
    def test_feedback_rating_range(self, rating):
        with pytest.raises(InvalidFeedbackError):
            RecommendationFeedback(difficulty_rating=rating)


class TestBatch:
    """Tests for batch generation and cleanup."""

    @pytest.mark.asyncio
    async def test_generate_for_active_users(self, service, seed, clock, memory_db):
        seed.problem()
        fresh = seed.user("fresh")
        done = seed.user("done")
        seed.user("disabled", is_active=False)
        seed.user("idle", last_active=clock.now() - timedelta(days=10))
        seed.recommendation(done, clock.today())

        result = await service.generate_for_active_users()

        assert result.day == clock.today()
        assert result.total == 2
        assert result.generated == 1
        assert result.skipped == 1
        assert result.errors == []
        assert (fresh.id, clock.today()) in memory_db.recommendations

    @pytest.mark.asyncio
    async def test_generate_isolates_failures(self, service, seed, clock, memory_db):
        seed.problem()
        ok = seed.user("ok")
        broken = seed.user("broken")

        original = service._choose

        async def flaky(user_id):
            if user_id == broken.id:
                raise RuntimeError("boom")
            return await original(user_id)

        service._choose = flaky

        result = await service.generate_for_active_users()

        assert result.generated == 1
        assert len(result.errors) == 1
        assert str(broken.id) in result.errors[0]
        assert (ok.id, clock.today()) in memory_db.recommendations

    @pytest.mark.asyncio
    async def test_generate_for_a_given_day(self, service, seed, memory_db):
        seed.problem()
        user = seed.user()

        result = await service.generate_for_active_users(date(2024, 3, 11))

        assert result.generated == 1
        assert (user.id, date(2024, 3, 11)) in memory_db.recommendations

    @pytest.mark.asyncio
    async def test_cleanup(self, service, seed, memory_db):
        user = seed.user()
        seed.recommendation(user, date(2024, 2, 8))
        seed.recommendation(user, date(2024, 2, 9))
        seed.recommendation(user, date(2024, 3, 10))

        deleted = await service.cleanup(retention_days=30)

        assert deleted == 1
        assert (user.id, date(2024, 2, 8)) not in memory_db.recommendations
        assert (user.id, date(2024, 2, 9)) in memory_db.recommendations
