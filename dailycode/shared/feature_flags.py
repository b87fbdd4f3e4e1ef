"""Runtime feature switches.

Each flag defaults to its ``ff_*`` field on ``Settings`` (so ``FF_*``
environment variables and the ``.env`` file both work). Tests and the CLI
can override a flag for the rest of the process or for a single block.

Usage:
    flags = get_feature_flags()
    if flags.is_enabled(FeatureFlags.USE_DATABASE_PERSISTENCE):
        ...

    with flags.overridden(FeatureFlags.ENABLE_BACKGROUND_JOBS, False):
        ...
"""

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from functools import lru_cache
import logging

from dailycode.shared.config import Settings, get_settings

logger = logging.getLogger(__name__)


class FeatureFlags(str, Enum):
    """Available feature flags."""

    # Store data in PostgreSQL instead of the process-local in-memory store
    USE_DATABASE_PERSISTENCE = "use_database_persistence"
    # Run the APScheduler jobs inside the API process
    ENABLE_BACKGROUND_JOBS = "enable_background_jobs"

    @property
    def env_key(self) -> str:
        return f"FF_{self.value.upper()}"

    @property
    def setting_name(self) -> str:
        return f"ff_{self.value}"


class FeatureFlagManager:
    """Resolves flags from settings, with runtime overrides taking precedence."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._overrides: dict[FeatureFlags, bool] = {}

    def is_enabled(self, flag: FeatureFlags) -> bool:
        if flag in self._overrides:
            return self._overrides[flag]
        return bool(getattr(self._settings, flag.setting_name, False))

    def set(self, flag: FeatureFlags, enabled: bool) -> None:
        """Override a flag until the override is cleared."""
        self._overrides[flag] = enabled
        logger.info(f"Feature flag {flag.value} set to {enabled}")

    def enable(self, flag: FeatureFlags) -> None:
        self.set(flag, True)

    def disable(self, flag: FeatureFlags) -> None:
        self.set(flag, False)

    def clear_override(self, flag: FeatureFlags) -> None:
        if self._overrides.pop(flag, None) is not None:
            logger.info(f"Feature flag override cleared: {flag.value}")

    def clear_all_overrides(self) -> None:
        self._overrides.clear()

    @contextmanager
    def overridden(self, flag: FeatureFlags, enabled: bool) -> Iterator[None]:
        """Override a flag for the duration of a ``with`` block."""
        previous = self._overrides.get(flag)
        self.set(flag, enabled)
        try:
            yield
        finally:
            if previous is None:
                self._overrides.pop(flag, None)
            else:
                self._overrides[flag] = previous

    def get_all_states(self) -> dict[str, bool]:
        """Effective state of every flag, keyed by flag value."""
        return {flag.value: self.is_enabled(flag) for flag in FeatureFlags}

    def __repr__(self) -> str:
        enabled = [name for name, on in self.get_all_states().items() if on]
        return f"FeatureFlagManager(enabled={enabled})"


@lru_cache
def get_feature_flags() -> FeatureFlagManager:
    """Process-wide flag manager built from the cached settings."""
    return FeatureFlagManager()


def is_database_persistence_enabled() -> bool:
    return get_feature_flags().is_enabled(FeatureFlags.USE_DATABASE_PERSISTENCE)


def is_background_jobs_enabled() -> bool:
    return get_feature_flags().is_enabled(FeatureFlags.ENABLE_BACKGROUND_JOBS)
