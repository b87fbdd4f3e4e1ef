"""Daily recommendation API routes."""

from fastapi import APIRouter

from dailycode.api.dependencies import CurrentUserId, RecommendationServiceDep
from dailycode.api.schemas.recommendations import FeedbackRequest, RecommendationResponse

router = APIRouter()


@router.get(
    "/today",
    response_model=RecommendationResponse,
    summary="Get today's recommendation",
    description="Get (creating if needed) the state of today's recommendation.",
)
async def get_today(
    user_id: CurrentUserId,
    recommendation_service: RecommendationServiceDep,
) -> RecommendationResponse:
    recommendation = await recommendation_service.get_or_create_daily(user_id)
    return RecommendationResponse.model_validate(recommendation)


@router.post(
    "/today/complete",
    response_model=RecommendationResponse,
    summary="Complete today's recommendation",
    description="Mark today's recommendation completed. Repeating the call changes nothing.",
)
async def complete_today(
    user_id: CurrentUserId,
    recommendation_service: RecommendationServiceDep,
) -> RecommendationResponse:
    """Complete today's recommendation.

    Raises:
        RecommendationNotFoundError: If there is no recommendation today
        RecommendationAlreadyClosedError: If it was skipped
    """
    recommendation = await recommendation_service.complete_today(user_id)
    return RecommendationResponse.model_validate(recommendation)


@router.post(
    "/today/skip",
    response_model=RecommendationResponse,
    summary="Skip today's recommendation",
    description="Mark today's recommendation skipped. Repeating the call changes nothing.",
)
async def skip_today(
    user_id: CurrentUserId,
    recommendation_service: RecommendationServiceDep,
) -> RecommendationResponse:
    """Skip today's recommendation.

    Raises:
        RecommendationNotFoundError: If there is no recommendation today
        RecommendationAlreadyClosedError: If it was completed
    """
    recommendation = await recommendation_service.skip_today(user_id)
    return RecommendationResponse.model_validate(recommendation)


@router.post(
    "/today/feedback",
    response_model=RecommendationResponse,
    summary="Rate today's recommendation",
    description="Attach feedback to today's recommendation, replacing any earlier feedback.",
)
async def submit_feedback(
    request: FeedbackRequest,
    user_id: CurrentUserId,
    recommendation_service: RecommendationServiceDep,
) -> RecommendationResponse:
    recommendation = await recommendation_service.submit_feedback(user_id, request.to_feedback())
    return RecommendationResponse.model_validate(recommendation)
