"""Progress API routes: mastery, streak, statistics and analysis."""

from fastapi import APIRouter, Query

from dailycode.api.dependencies import (
    CurrentUserId,
    MasteryServiceDep,
    ProgressServiceDep,
    StreakServiceDep,
)
from dailycode.api.schemas.progress import (
    DailySolveCountResponse,
    GroupSummaryResponse,
    MasteryOverviewResponse,
    PerformanceAnalysisResponse,
    ProgressStatsResponse,
    StreakResponse,
)

router = APIRouter()


@router.get(
    "/mastery",
    response_model=MasteryOverviewResponse,
    summary="Get topic mastery",
    description="All topic masteries, the overall mastery and up to three topics to focus on.",
)
async def get_mastery(
    user_id: CurrentUserId,
    mastery_service: MasteryServiceDep,
) -> MasteryOverviewResponse:
    overview = await mastery_service.get_overview(user_id)
    return MasteryOverviewResponse.model_validate(overview)


@router.get(
    "/streak",
    response_model=StreakResponse,
    summary="Get streak",
    description="Current and longest streak of completed days, with the last seven days of activity.",
)
async def get_streak(
    user_id: CurrentUserId,
    streak_service: StreakServiceDep,
) -> StreakResponse:
    """Recompute and return the user's streak.

    Raises:
        UserNotFoundError: If the user does not exist
    """
    streak = await streak_service.refresh(user_id)
    return StreakResponse.model_validate(streak)


@router.get(
    "/stats",
    response_model=ProgressStatsResponse,
    summary="Get progress statistics",
    description="Totals, success rate and per-topic and per-difficulty breakdowns.",
)
async def get_stats(
    user_id: CurrentUserId,
    progress_service: ProgressServiceDep,
    timeframe: int = Query(default=30, ge=1, le=365, description="Days covered by the recent figures"),
) -> ProgressStatsResponse:
    stats = await progress_service.get_stats(user_id, timeframe_days=timeframe)

    return ProgressStatsResponse(
        timeframe_days=timeframe,
        total_solved=stats.total_solved,
        total_attempted=stats.total_attempted,
        recent_solved=stats.recent_solved,
        success_rate=stats.success_rate,
        topic_stats=[GroupSummaryResponse.model_validate(g) for g in stats.topic_stats],
        difficulty_stats=[GroupSummaryResponse.model_validate(g) for g in stats.difficulty_stats],
        daily_activity=[DailySolveCountResponse.model_validate(d) for d in stats.daily_activity],
    )


@router.get(
    "/analysis",
    response_model=PerformanceAnalysisResponse,
    summary="Analyze performance",
    description="Strong and weak topics over the most recent progress records, with advice.",
)
async def get_analysis(
    user_id: CurrentUserId,
    progress_service: ProgressServiceDep,
) -> PerformanceAnalysisResponse:
    analysis = await progress_service.analyze_user_performance(user_id)
    return PerformanceAnalysisResponse.model_validate(analysis)
