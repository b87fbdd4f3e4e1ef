"""FastAPI dependency injection for services and authentication.

Services come from the process-wide ServiceRegistry so that the API, the
scheduler and the CLI share one store selection and one clock.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends

from dailycode.api.middleware.auth import get_current_user_id
from dailycode.modules.mastery.service import MasteryService
from dailycode.modules.problems.service import ProblemService
from dailycode.modules.progress.service import ProgressService
from dailycode.modules.recommendation.service import RecommendationService
from dailycode.modules.recommendation.streak import StreakService
from dailycode.shared.service_registry import get_service_registry


# ===================
# Service Dependencies
# ===================

def get_problem_service() -> ProblemService:
    return get_service_registry().get_problem_service()


def get_progress_service() -> ProgressService:
    return get_service_registry().get_progress_service()


def get_mastery_service() -> MasteryService:
    return get_service_registry().get_mastery_service()


def get_recommendation_service() -> RecommendationService:
    return get_service_registry().get_recommendation_service()


def get_streak_service() -> StreakService:
    return get_service_registry().get_streak_service()


# ===================
# Type Aliases for Dependencies
# ===================

CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]

ProblemServiceDep = Annotated[ProblemService, Depends(get_problem_service)]
ProgressServiceDep = Annotated[ProgressService, Depends(get_progress_service)]
MasteryServiceDep = Annotated[MasteryService, Depends(get_mastery_service)]
RecommendationServiceDep = Annotated[RecommendationService, Depends(get_recommendation_service)]
StreakServiceDep = Annotated[StreakService, Depends(get_streak_service)]
