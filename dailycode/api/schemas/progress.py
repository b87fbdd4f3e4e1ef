"""Progress, mastery and streak API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from dailycode.shared.models import Difficulty, Topic


class TopicMasteryResponse(BaseModel):
    """Mastery of one topic. Tier maps are keyed by difficulty."""

    topic: Topic
    mastery_level: int = Field(..., ge=0, le=100)
    recommended_difficulty: Difficulty
    problems_attempted: dict[str, int]
    problems_solved: dict[str, int]
    success_rates: dict[str, float]
    average_attempts: dict[str, float]
    last_updated: datetime

    model_config = {"from_attributes": True}


class FocusTopicResponse(BaseModel):
    topic: Topic
    mastery_level: int
    recommended_difficulty: Difficulty
    reason: str

    model_config = {"from_attributes": True}


class MasteryOverviewResponse(BaseModel):
    """All topic masteries, highest first, with the topics to focus on."""

    overall_mastery: int = Field(..., description="Rounded mean mastery over touched topics")
    topics: list[TopicMasteryResponse]
    focus_topics: list[FocusTopicResponse]

    model_config = {"from_attributes": True}


class DayActivityResponse(BaseModel):
    date: date
    completed: bool
    skipped: bool

    model_config = {"from_attributes": True}


class StreakResponse(BaseModel):
    current_streak: int
    longest_streak: int
    recent_activity: list[DayActivityResponse] = Field(
        ...,
        description="Most recent recommendations, newest first",
    )

    model_config = {"from_attributes": True}


class GroupSummaryResponse(BaseModel):
    key: str
    attempted: int
    solved: int
    average_attempts: float

    model_config = {"from_attributes": True}


class DailySolveCountResponse(BaseModel):
    day: date
    solved: int

    model_config = {"from_attributes": True}


class ProgressStatsResponse(BaseModel):
    """Progress statistics; recent figures cover the requested timeframe."""

    timeframe_days: int
    total_solved: int
    total_attempted: int
    recent_solved: int
    success_rate: int = Field(..., description="Percentage of attempted problems solved")
    topic_stats: list[GroupSummaryResponse]
    difficulty_stats: list[GroupSummaryResponse]
    daily_activity: list[DailySolveCountResponse]


class PerformanceAnalysisResponse(BaseModel):
    overall_success_rate: float
    average_attempts: float
    strong_topics: list[Topic]
    weak_topics: list[Topic]
    recommendations: list[str]

    model_config = {"from_attributes": True}
