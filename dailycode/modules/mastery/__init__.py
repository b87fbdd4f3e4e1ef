"""Mastery Module - Topic mastery scoring and recomputation."""

from dailycode.modules.mastery.interface import (
    FocusTopic,
    IMasteryRepository,
    MasteryOverview,
    SweepResult,
    TopicMastery,
)
from dailycode.modules.mastery.scoring import compute_mastery, difficulty_for_mastery

__all__ = [
    "FocusTopic",
    "IMasteryRepository",
    "MasteryOverview",
    "SweepResult",
    "TopicMastery",
    "compute_mastery",
    "difficulty_for_mastery",
]
