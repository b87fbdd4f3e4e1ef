"""Unit tests for service registry."""

from unittest.mock import patch

from dailycode.shared.datetime_utils import FixedClock
from dailycode.shared.feature_flags import FeatureFlags, get_feature_flags
from dailycode.shared.service_registry import (
    ServiceRegistry,
    get_mastery_service,
    get_problem_service,
    get_progress_service,
    get_recommendation_service,
    get_service_registry,
    get_streak_service,
)
from dailycode.shared.unit_of_work import InMemoryUnitOfWork, SqlUnitOfWork
from tests.factories import NOW


class TestServiceRegistry:
    """Tests for ServiceRegistry."""

    def test_singleton_pattern(self):
        """Test that ServiceRegistry is a singleton."""
        registry1 = ServiceRegistry()
        registry2 = ServiceRegistry()
        assert registry1 is registry2
        assert get_service_registry() is registry1

    def test_in_memory_store_by_default(self):
        """Test that the in-memory unit of work is used by default."""
        registry = get_service_registry()

        uow = registry.get_uow_factory()()

        assert isinstance(uow, InMemoryUnitOfWork)
        assert registry.get_service_info()["store"] == "memory"

    def test_sql_store_when_enabled(self):
        """Test that the SQL unit of work is used when the flag is enabled."""
        get_feature_flags().enable(FeatureFlags.USE_DATABASE_PERSISTENCE)
        registry = get_service_registry()

        with patch("dailycode.shared.unit_of_work.get_session_factory") as mock_factory:
            uow = registry.get_uow_factory()()

        assert isinstance(uow, SqlUnitOfWork)
        assert registry.get_service_info()["store"] == "postgresql"
        mock_factory.assert_called_once()

    def test_falls_back_to_memory_when_sql_setup_fails(self):
        """Test fallback when the SQL store cannot be set up."""
        get_feature_flags().enable(FeatureFlags.USE_DATABASE_PERSISTENCE)
        registry = get_service_registry()

        with patch(
            "dailycode.shared.unit_of_work.sql_unit_of_work_factory",
            side_effect=RuntimeError("no driver"),
        ):
            uow = registry.get_uow_factory()()

        assert isinstance(uow, InMemoryUnitOfWork)
        assert registry.get_service_info()["store"] == "memory"

    def test_services_are_cached(self):
        """Test that the same service instance is returned on repeated calls."""
        registry = get_service_registry()

        assert registry.get_progress_service() is registry.get_progress_service()
        assert get_recommendation_service() is registry.get_recommendation_service()
        assert get_mastery_service() is registry.get_mastery_service()
        assert get_problem_service() is registry.get_problem_service()
        assert get_streak_service() is registry.get_streak_service()
        assert get_progress_service() is registry.get_progress_service()

    def test_clear_cache(self):
        """Test that clear_cache forces new service instances."""
        registry = get_service_registry()
        service1 = registry.get_recommendation_service()
        db = registry.get_memory_db()

        registry.clear_cache()
        service2 = registry.get_recommendation_service()

        assert service1 is not service2
        assert registry.get_memory_db() is db

    def test_use_clock_rebuilds_services(self):
        """Test that services pick up a replaced clock."""
        registry = get_service_registry()
        before = registry.get_streak_service()
        clock = FixedClock(NOW)

        registry.use_clock(clock)

        assert registry.clock is clock
        assert registry.get_streak_service() is not before

    def test_get_service_info(self):
        """Test getting service information."""
        registry = get_service_registry()
        registry.get_progress_service()

        info = registry.get_service_info()

        assert info["progress"] == "ProgressService"
        assert info["mastery"] == "MasteryService"
        assert "recommendation" not in info
