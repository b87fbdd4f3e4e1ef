"""Daily recommendation API schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from dailycode.modules.recommendation.interface import RecommendationFeedback
from dailycode.shared.models import RecommendationReason


class FeedbackRequest(BaseModel):
    """Feedback on today's recommendation. Replaces earlier feedback."""

    difficulty_rating: int | None = Field(
        default=None,
        description="Perceived difficulty from 1 (trivial) to 5 (very hard)",
    )
    helpful: bool | None = None
    comments: str | None = Field(default=None, max_length=2000)

    def to_feedback(self) -> RecommendationFeedback:
        return RecommendationFeedback(
            difficulty_rating=self.difficulty_rating,
            helpful=self.helpful,
            comments=self.comments,
        )


class FeedbackResponse(BaseModel):
    difficulty_rating: int | None = None
    helpful: bool | None = None
    comments: str | None = None

    model_config = {"from_attributes": True}


class RecommendationResponse(BaseModel):
    """State of a day's recommendation."""

    id: UUID
    date: date
    selected_problem_id: UUID
    reason: RecommendationReason
    completed: bool
    completed_at: datetime | None = None
    skipped: bool
    feedback: FeedbackResponse | None = None

    model_config = {"from_attributes": True}
