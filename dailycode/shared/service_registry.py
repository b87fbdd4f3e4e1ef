"""Unified service registry for dependency injection.

This module provides a centralized service factory that switches between
the in-memory and the PostgreSQL store based on feature flags.

Usage:
    from dailycode.shared.service_registry import get_service_registry

    registry = get_service_registry()
    recommendations = registry.get_recommendation_service()
    progress = registry.get_progress_service()

The registry automatically:
- Uses the SQL unit of work when FF_USE_DATABASE_PERSISTENCE=true
- Falls back to the in-memory store when the SQL store cannot be set up
- Caches service instances for consistent singleton behavior
- Logs service creation for debugging
"""

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from dailycode.shared.config import get_settings
from dailycode.shared.datetime_utils import Clock, SystemClock
from dailycode.shared.feature_flags import FeatureFlags, get_feature_flags
from dailycode.shared.repository import UnitOfWorkFactory

if TYPE_CHECKING:
    from dailycode.modules.mastery.service import MasteryService
    from dailycode.modules.problems.service import ProblemService
    from dailycode.modules.progress.service import ProgressService
    from dailycode.modules.recommendation.service import RecommendationService
    from dailycode.modules.recommendation.streak import StreakService
    from dailycode.shared.unit_of_work import InMemoryDatabase

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """Unified service factory with feature flag support.

    Features:
    - Lazy service instantiation
    - Feature flag-based store selection
    - Automatic fallback on connection errors
    - Service instance caching
    """

    _instance: "ServiceRegistry | None" = None

    def __new__(cls) -> "ServiceRegistry":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return
        self._flags = get_feature_flags()
        self._clock: Clock = SystemClock()
        self._memory_db: "InMemoryDatabase | None" = None
        self._uow_factory: UnitOfWorkFactory | None = None
        self._store_type: str | None = None
        self._mastery_service: "MasteryService | None" = None
        self._problem_service: "ProblemService | None" = None
        self._progress_service: "ProgressService | None" = None
        self._recommendation_service: "RecommendationService | None" = None
        self._streak_service: "StreakService | None" = None
        self._initialized = True
        logger.info("ServiceRegistry initialized")

    @property
    def clock(self) -> Clock:
        return self._clock

    def use_clock(self, clock: Clock) -> None:
        """Replace the clock handed to services and drop cached services."""
        self._clock = clock
        self._drop_services()

    def get_memory_db(self) -> "InMemoryDatabase":
        """The process-wide in-memory database (created on first use)."""
        if self._memory_db is None:
            from dailycode.shared.unit_of_work import InMemoryDatabase

            self._memory_db = InMemoryDatabase()
        return self._memory_db

    def get_uow_factory(self) -> UnitOfWorkFactory:
        """Unit of work factory for the configured store.

        Returns the SQL unit of work if FF_USE_DATABASE_PERSISTENCE is
        enabled, otherwise the in-memory one.
        """
        if self._uow_factory is None:
            self._uow_factory = self._create_uow_factory()
        return self._uow_factory

    def _create_uow_factory(self) -> UnitOfWorkFactory:
        from dailycode.shared.unit_of_work import (
            memory_unit_of_work_factory,
            sql_unit_of_work_factory,
        )

        if self._flags.is_enabled(FeatureFlags.USE_DATABASE_PERSISTENCE):
            try:
                factory = sql_unit_of_work_factory()
                logger.info("Using PostgreSQL unit of work")
                self._store_type = "postgresql"
                return factory
            except Exception as e:
                logger.warning(f"Failed to set up PostgreSQL store, falling back to memory: {e}")

        logger.info("Using in-memory unit of work")
        self._store_type = "memory"
        return memory_unit_of_work_factory(self.get_memory_db())

    def get_mastery_service(self) -> "MasteryService":
        if self._mastery_service is None:
            from dailycode.modules.mastery.service import MasteryService

            self._mastery_service = MasteryService(self.get_uow_factory(), self._clock)
            logger.info("Creating MasteryService")
        return self._mastery_service

    def get_problem_service(self) -> "ProblemService":
        if self._problem_service is None:
            from dailycode.modules.problems.service import ProblemService

            self._problem_service = ProblemService(self.get_uow_factory())
            logger.info("Creating ProblemService")
        return self._problem_service

    def get_progress_service(self) -> "ProgressService":
        if self._progress_service is None:
            from dailycode.modules.progress.service import ProgressService

            self._progress_service = ProgressService(
                self.get_uow_factory(),
                mastery_service=self.get_mastery_service(),
                clock=self._clock,
            )
            logger.info("Creating ProgressService")
        return self._progress_service

    def get_recommendation_service(self) -> "RecommendationService":
        if self._recommendation_service is None:
            from dailycode.modules.recommendation.service import RecommendationService

            self._recommendation_service = RecommendationService(
                self.get_uow_factory(),
                clock=self._clock,
                active_window_days=get_settings().active_user_window_days,
            )
            logger.info("Creating RecommendationService")
        return self._recommendation_service

    def get_streak_service(self) -> "StreakService":
        if self._streak_service is None:
            from dailycode.modules.recommendation.streak import StreakService

            self._streak_service = StreakService(
                self.get_uow_factory(),
                clock=self._clock,
                lookback_days=get_settings().streak_lookback_days,
            )
            logger.info("Creating StreakService")
        return self._streak_service

    def _drop_services(self) -> None:
        self._mastery_service = None
        self._problem_service = None
        self._progress_service = None
        self._recommendation_service = None
        self._streak_service = None

    def clear_cache(self) -> None:
        """Clear the store selection and all cached service instances.

        Use this when feature flags change at runtime to force
        recreation of services with new settings. The in-memory database
        itself is kept.
        """
        self._uow_factory = None
        self._store_type = None
        self._drop_services()
        logger.info("ServiceRegistry cache cleared")

    def get_service_info(self) -> dict[str, str]:
        """Get information about currently instantiated services.

        Returns:
            Dictionary of service names to their implementation types
        """
        info = {}
        if self._store_type:
            info["store"] = self._store_type
        if self._mastery_service:
            info["mastery"] = type(self._mastery_service).__name__
        if self._problem_service:
            info["problems"] = type(self._problem_service).__name__
        if self._progress_service:
            info["progress"] = type(self._progress_service).__name__
        if self._recommendation_service:
            info["recommendation"] = type(self._recommendation_service).__name__
        if self._streak_service:
            info["streak"] = type(self._streak_service).__name__
        return info

    def __repr__(self) -> str:
        db_enabled = self._flags.is_enabled(FeatureFlags.USE_DATABASE_PERSISTENCE)
        return f"ServiceRegistry(db_enabled={db_enabled}, services={self.get_service_info()})"


@lru_cache
def get_service_registry() -> ServiceRegistry:
    """Get the singleton ServiceRegistry instance.

    Returns:
        The shared ServiceRegistry instance
    """
    return ServiceRegistry()


# Convenience functions for common service access
def get_mastery_service() -> "MasteryService":
    return get_service_registry().get_mastery_service()


def get_problem_service() -> "ProblemService":
    return get_service_registry().get_problem_service()


def get_progress_service() -> "ProgressService":
    return get_service_registry().get_progress_service()


def get_recommendation_service() -> "RecommendationService":
    return get_service_registry().get_recommendation_service()


def get_streak_service() -> "StreakService":
    return get_service_registry().get_streak_service()
