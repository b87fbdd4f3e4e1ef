"""Unit tests for feature flag management."""

from dailycode.shared.config import Settings
from dailycode.shared.feature_flags import (
    FeatureFlagManager,
    FeatureFlags,
    get_feature_flags,
    is_background_jobs_enabled,
    is_database_persistence_enabled,
)


class TestFeatureFlags:
    """Tests for FeatureFlags enum."""

    def test_names(self):
        flag = FeatureFlags.USE_DATABASE_PERSISTENCE

        assert flag.env_key == "FF_USE_DATABASE_PERSISTENCE"
        assert flag.setting_name == "ff_use_database_persistence"

    def test_every_flag_has_a_setting(self):
        for flag in FeatureFlags:
            assert flag.setting_name in Settings.model_fields


class TestFeatureFlagManager:
    """Tests for FeatureFlagManager."""

    def test_disabled_by_default(self):
        manager = FeatureFlagManager(Settings())

        assert manager.is_enabled(FeatureFlags.USE_DATABASE_PERSISTENCE) is False
        assert manager.is_enabled(FeatureFlags.ENABLE_BACKGROUND_JOBS) is False

    def test_default_from_settings(self):
        manager = FeatureFlagManager(Settings(ff_use_database_persistence=True))

        assert manager.is_enabled(FeatureFlags.USE_DATABASE_PERSISTENCE) is True
        assert manager.is_enabled(FeatureFlags.ENABLE_BACKGROUND_JOBS) is False

    def test_default_from_environment(self, monkeypatch):
        """Test that FF_* variables reach the flag through Settings."""
        for value in ["true", "1", "yes", "on"]:
            monkeypatch.setenv("FF_ENABLE_BACKGROUND_JOBS", value)
            manager = FeatureFlagManager(Settings())
            assert manager.is_enabled(FeatureFlags.ENABLE_BACKGROUND_JOBS) is True, f"Failed for {value}"

    def test_runtime_override_beats_settings(self):
        manager = FeatureFlagManager(Settings(ff_enable_background_jobs=True))

        manager.disable(FeatureFlags.ENABLE_BACKGROUND_JOBS)
        assert manager.is_enabled(FeatureFlags.ENABLE_BACKGROUND_JOBS) is False

        manager.clear_override(FeatureFlags.ENABLE_BACKGROUND_JOBS)
        assert manager.is_enabled(FeatureFlags.ENABLE_BACKGROUND_JOBS) is True

    def test_clear_all_overrides(self):
        manager = FeatureFlagManager(Settings())
        manager.enable(FeatureFlags.USE_DATABASE_PERSISTENCE)
        manager.enable(FeatureFlags.ENABLE_BACKGROUND_JOBS)

        manager.clear_all_overrides()

        assert manager.get_all_states() == {
            "use_database_persistence": False,
            "enable_background_jobs": False,
        }

    def test_overridden_block_restores_previous_state(self):
        manager = FeatureFlagManager(Settings())
        manager.enable(FeatureFlags.ENABLE_BACKGROUND_JOBS)

        with manager.overridden(FeatureFlags.ENABLE_BACKGROUND_JOBS, False):
            assert manager.is_enabled(FeatureFlags.ENABLE_BACKGROUND_JOBS) is False
        with manager.overridden(FeatureFlags.USE_DATABASE_PERSISTENCE, True):
            assert manager.is_enabled(FeatureFlags.USE_DATABASE_PERSISTENCE) is True

        assert manager.get_all_states() == {
            "use_database_persistence": False,
            "enable_background_jobs": True,
        }


class TestConvenienceFunctions:
    """Tests for the module-level helpers."""

    def test_manager_is_cached(self):
        assert get_feature_flags() is get_feature_flags()

    def test_helpers_follow_the_cached_manager(self):
        get_feature_flags().enable(FeatureFlags.ENABLE_BACKGROUND_JOBS)

        assert is_background_jobs_enabled() is True
        assert is_database_persistence_enabled() is False
