"""API schemas package."""

from dailycode.api.schemas.common import PaginatedResponse
from dailycode.api.schemas.problems import (
    DailyRecommendationResponse,
    ProblemDetailResponse,
    ProblemResponse,
    ProblemSummaryResponse,
    ProgressResponse,
    SubmitRequest,
    SubmitResponse,
)
from dailycode.api.schemas.progress import (
    MasteryOverviewResponse,
    PerformanceAnalysisResponse,
    ProgressStatsResponse,
    StreakResponse,
    TopicMasteryResponse,
)
from dailycode.api.schemas.recommendations import (
    FeedbackRequest,
    RecommendationResponse,
)

__all__ = [
    # Common
    "PaginatedResponse",
    # Problems
    "DailyRecommendationResponse",
    "ProblemDetailResponse",
    "ProblemResponse",
    "ProblemSummaryResponse",
    "ProgressResponse",
    "SubmitRequest",
    "SubmitResponse",
    # Progress
    "MasteryOverviewResponse",
    "PerformanceAnalysisResponse",
    "ProgressStatsResponse",
    "StreakResponse",
    "TopicMasteryResponse",
    # Recommendations
    "FeedbackRequest",
    "RecommendationResponse",
]
