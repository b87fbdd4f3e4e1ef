"""Shared utilities and common code."""

from dailycode.shared.config import Settings, get_settings
from dailycode.shared.database import (
    Base,
    close_db,
    init_db,
    shutdown,
    startup,
)
from dailycode.shared.models import (
    AttemptResult,
    Difficulty,
    Language,
    ProgressStatus,
    RecommendationReason,
    SkillLevel,
    Topic,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Database
    "Base",
    "init_db",
    "close_db",
    "startup",
    "shutdown",
    # Enums
    "AttemptResult",
    "Difficulty",
    "Language",
    "ProgressStatus",
    "RecommendationReason",
    "SkillLevel",
    "Topic",
]
