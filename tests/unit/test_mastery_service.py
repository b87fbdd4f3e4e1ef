"""Unit tests for the mastery service."""

from datetime import timedelta

import pytest

from dailycode.modules.mastery.service import MasteryService
from dailycode.modules.progress.service import ProgressService
from dailycode.shared.models import Difficulty, Topic
from tests.factories import failing, passing


@pytest.fixture
def service(uow_factory, clock):
    return MasteryService(uow_factory, clock)


class TestRecompute:
    """Tests for recomputing stored mastery."""

    @pytest.mark.asyncio
    async def test_recompute_stores_document(self, service, seed, memory_db, clock):
        user = seed.user()
        seed.progress(user, seed.problem(Topic.ARRAYS, Difficulty.MEDIUM), True)
        seed.progress(user, seed.problem(Topic.ARRAYS, Difficulty.EASY), False)

        mastery = await service.recompute(user.id, Topic.ARRAYS)

        assert mastery.mastery_level == 71
        assert mastery.recommended_difficulty == Difficulty.HARD
        assert mastery.last_updated == clock.now()
        assert memory_db.mastery[(user.id, Topic.ARRAYS)].mastery_level == 71

    @pytest.mark.asyncio
    async def test_recompute_without_records_writes_nothing(self, service, seed, memory_db):
        user = seed.user()

        mastery = await service.recompute(user.id, Topic.GRAPHS)

        assert mastery.mastery_level == 0
        assert memory_db.mastery == {}

    @pytest.mark.asyncio
    async def test_recompute_without_records_keeps_stored_level(self, service, seed, memory_db):
        user = seed.user()
        stored = seed.mastery(user, Topic.GRAPHS, 44)

        mastery = await service.recompute(user.id, Topic.GRAPHS)

        assert mastery.id == stored.id
        assert mastery.mastery_level == 44

    @pytest.mark.asyncio
    async def test_recompute_keeps_document_id(self, service, seed, memory_db):
        user = seed.user()
        stored = seed.mastery(user, Topic.STACK, 5)
        seed.progress(user, seed.problem(Topic.STACK), True)

        mastery = await service.recompute(user.id, Topic.STACK)

        assert mastery.id == stored.id
        assert mastery.mastery_level == 62

    @pytest.mark.asyncio
    async def test_recompute_user_covers_every_touched_topic(self, service, seed, memory_db):
        user = seed.user()
        seed.progress(user, seed.problem(Topic.QUEUE), True)
        seed.progress(user, seed.problem(Topic.TREES), False)

        recomputed = await service.recompute_user(user.id)

        assert {m.topic for m in recomputed} == {Topic.QUEUE, Topic.TREES}
        assert set(memory_db.mastery) == {(user.id, Topic.QUEUE), (user.id, Topic.TREES)}


class TestOverview:
    """Tests for MasteryService.get_overview."""

    @pytest.mark.asyncio
    async def test_empty_overview(self, service, seed):
        user = seed.user()

        overview = await service.get_overview(user.id)

        assert overview.overall_mastery == 0
        assert overview.topics == []
        assert overview.focus_topics == []

    @pytest.mark.asyncio
    async def test_sorted_with_focus_topics(self, service, seed):
        user = seed.user()
        levels = {
            Topic.ARRAYS: 85,
            Topic.STRINGS: 20,
            Topic.STACK: 50,
            Topic.QUEUE: 65,
            Topic.TREES: 10,
        }
        for topic, level in levels.items():
            seed.mastery(user, topic, level)

        overview = await service.get_overview(user.id)

        assert [m.mastery_level for m in overview.topics] == [85, 65, 50, 20, 10]
        assert overview.overall_mastery == 46
        assert [(f.topic, f.reason) for f in overview.focus_topics] == [
            (Topic.TREES, "Focus on basics"),
            (Topic.STRINGS, "Focus on basics"),
            (Topic.STACK, "Practice more problems"),
        ]

    @pytest.mark.asyncio
    async def test_overall_rounds_half_up(self, service, seed):
        user = seed.user()
        seed.mastery(user, Topic.ARRAYS, 70)
        seed.mastery(user, Topic.STRINGS, 71)

        overview = await service.get_overview(user.id)

        assert overview.overall_mastery == 71
        assert overview.focus_topics == []


class TestSweep:
    """Tests for MasteryService.recompute_recent."""

    @pytest.mark.asyncio
    async def test_sweep_only_touches_recent_users(self, service, seed, uow_factory, clock, memory_db):
        progress = ProgressService(uow_factory, mastery_service=service, clock=clock)
        recent = seed.user("recent")
        stale = seed.user("stale")
        await progress.record_attempt(recent.id, seed.problem(Topic.ARRAYS).id, passing())
        await progress.record_attempt(recent.id, seed.problem(Topic.STRINGS).id, failing())
        seed.progress(stale, seed.problem(Topic.GRAPHS), True)

        result = await service.recompute_recent(clock.now() - timedelta(days=2))

        assert result.users == 1
        assert result.topics_recomputed == 2
        assert result.errors == []
        assert (stale.id, Topic.GRAPHS) not in memory_db.mastery

    @pytest.mark.asyncio
    async def test_sweep_isolates_failures(self, service, seed, uow_factory, clock):
        progress = ProgressService(uow_factory, mastery_service=service, clock=clock)
        good = seed.user("good")
        bad = seed.user("bad")
        await progress.record_attempt(good.id, seed.problem().id, passing())
        await progress.record_attempt(bad.id, seed.problem().id, passing())

        original = service.recompute_user

        async def flaky(user_id):
            if user_id == bad.id:
                raise RuntimeError("boom")
            return await original(user_id)

        service.recompute_user = flaky

        result = await service.recompute_recent(clock.now() - timedelta(days=2))

        assert result.users == 1
        assert len(result.errors) == 1
        assert str(bad.id) in result.errors[0]
