"""Problem API routes: today's pick, problem details, submissions and listings."""

from uuid import UUID

from fastapi import APIRouter, Query

from dailycode.api.dependencies import (
    CurrentUserId,
    ProblemServiceDep,
    ProgressServiceDep,
    RecommendationServiceDep,
)
from dailycode.api.schemas.common import PaginatedResponse
from dailycode.api.schemas.problems import (
    AttemptResponse,
    DailyRecommendationResponse,
    ProblemDetailResponse,
    ProblemResponse,
    ProblemSummaryResponse,
    ProgressResponse,
    SubmitRequest,
    SubmitResponse,
)
from dailycode.api.schemas.progress import TopicMasteryResponse
from dailycode.shared.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from dailycode.shared.models import parse_difficulty, parse_topic

router = APIRouter()


def _progress_response(progress) -> ProgressResponse | None:
    if progress is None:
        return None
    return ProgressResponse.model_validate(progress)


@router.get(
    "/daily-recommendation",
    response_model=DailyRecommendationResponse,
    summary="Get today's problem",
    description="Get the problem recommended to the user for the current UTC day, creating the recommendation on first request.",
)
async def get_daily_recommendation(
    user_id: CurrentUserId,
    recommendation_service: RecommendationServiceDep,
    problem_service: ProblemServiceDep,
) -> DailyRecommendationResponse:
    """Today's recommendation with the selected problem and the user's progress on it."""
    recommendation = await recommendation_service.get_or_create_daily(user_id)
    view = await problem_service.get_for_user(user_id, recommendation.selected_problem_id)

    return DailyRecommendationResponse(
        recommendation_id=recommendation.id,
        date=recommendation.date,
        reason=recommendation.reason,
        completed=recommendation.completed,
        skipped=recommendation.skipped,
        problem=ProblemResponse.model_validate(view.problem),
        progress=_progress_response(view.progress),
    )


@router.get(
    "/topic/{topic}",
    response_model=PaginatedResponse[ProblemSummaryResponse],
    summary="List problems by topic",
    description="List active problems in a topic, optionally filtered by difficulty.",
)
async def list_problems_by_topic(
    topic: str,
    user_id: CurrentUserId,
    problem_service: ProblemServiceDep,
    difficulty: str | None = Query(default=None, description="easy, medium or hard"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> PaginatedResponse[ProblemSummaryResponse]:
    """One page of a topic's active problems.

    Raises:
        InvalidTopicError: If the topic is unknown
        InvalidDifficultyError: If the difficulty filter is unknown
    """
    result = await problem_service.list_by_topic(
        parse_topic(topic),
        difficulty=parse_difficulty(difficulty) if difficulty else None,
        page=page,
        page_size=limit,
    )

    return PaginatedResponse[ProblemSummaryResponse].from_page(
        result, ProblemSummaryResponse.model_validate
    )


@router.get(
    "/{problem_id}",
    response_model=ProblemDetailResponse,
    summary="Get problem",
    description="Get a problem and the user's progress on it. The solution is withheld until solved.",
)
async def get_problem(
    problem_id: UUID,
    user_id: CurrentUserId,
    problem_service: ProblemServiceDep,
) -> ProblemDetailResponse:
    view = await problem_service.get_for_user(user_id, problem_id)
    return ProblemDetailResponse(
        problem=ProblemResponse.model_validate(view.problem),
        progress=_progress_response(view.progress),
    )


@router.post(
    "/{problem_id}/submit",
    response_model=SubmitResponse,
    summary="Submit attempt",
    description="Record an attempt on a problem and return the updated progress and topic mastery.",
)
async def submit_attempt(
    problem_id: UUID,
    request: SubmitRequest,
    user_id: CurrentUserId,
    progress_service: ProgressServiceDep,
) -> SubmitResponse:
    """Record one attempt.

    Raises:
        InvalidAttemptError: If the payload is inconsistent
        ProblemNotFoundError: If the problem does not exist or is inactive
    """
    result = await progress_service.record_attempt(user_id, problem_id, request.to_submission())

    return SubmitResponse(
        message=(
            "Solution accepted!" if result.attempt.passed
            else "Solution failed some test cases"
        ),
        result=result.attempt.result,
        attempt=AttemptResponse.model_validate(result.attempt),
        progress=ProgressResponse.model_validate(result.progress),
        mastery=TopicMasteryResponse.model_validate(result.mastery),
        first_solve=result.first_solve,
        recommendation_completed=result.recommendation_completed,
    )
