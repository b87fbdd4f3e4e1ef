"""Recommendation Module - Daily recommendations, topic policy and streaks."""

from dailycode.modules.recommendation.interface import (
    BatchResult,
    DailyRecommendation,
    IRecommendationRepository,
    RecommendationFeedback,
    RecommendedProblem,
    SelectionRule,
    StreakInfo,
    TopicChoice,
)

__all__ = [
    "BatchResult",
    "DailyRecommendation",
    "IRecommendationRepository",
    "RecommendationFeedback",
    "RecommendedProblem",
    "SelectionRule",
    "StreakInfo",
    "TopicChoice",
]
