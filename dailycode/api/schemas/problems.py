"""Problem and submission API schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from dailycode.api.schemas.progress import TopicMasteryResponse
from dailycode.modules.progress.interface import AttemptSubmission
from dailycode.shared.models import (
    AttemptResult,
    Difficulty,
    Language,
    ProgressStatus,
    RecommendationReason,
    Topic,
)


class TestCaseResponse(BaseModel):
    """Visible test case."""

    __test__ = False

    input: str
    expected_output: str

    model_config = {"from_attributes": True}


class ExampleResponse(BaseModel):
    input: str
    output: str
    explanation: str | None = None

    model_config = {"from_attributes": True}


class ProblemResponse(BaseModel):
    """Problem as a user may see it.

    The solution is only present once the user has solved the problem.
    """

    id: UUID
    title: str
    description: str
    difficulty: Difficulty
    topic: Topic
    tags: list[str] = Field(default_factory=list)
    test_cases: list[TestCaseResponse] = Field(default_factory=list)
    solution: str | None = None
    hints: list[str] = Field(default_factory=list)
    time_complexity: str | None = None
    space_complexity: str | None = None
    constraints: str | None = None
    examples: list[ExampleResponse] = Field(default_factory=list)
    created_at: datetime

    model_config = {"from_attributes": True}


class ProblemSummaryResponse(BaseModel):
    """Problem entry in a topic listing; no solution or test cases."""

    id: UUID
    title: str
    difficulty: Difficulty
    topic: Topic
    tags: list[str] = Field(default_factory=list)
    created_at: datetime

    model_config = {"from_attributes": True}


class AttemptResponse(BaseModel):
    attempt_number: int
    language: Language
    result: AttemptResult
    time_taken: float = Field(..., description="Minutes spent on the attempt")
    test_cases_passed: int
    total_test_cases: int
    timestamp: datetime

    model_config = {"from_attributes": True}


class ProgressResponse(BaseModel):
    """A user's progress on one problem."""

    problem_id: UUID
    topic: Topic
    difficulty: Difficulty
    status: ProgressStatus
    total_attempts: int
    first_attempt_date: datetime | None = None
    solved_date: datetime | None = None
    best_time: float | None = None
    hints_used: int = 0
    attempts: list[AttemptResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class ProblemDetailResponse(BaseModel):
    problem: ProblemResponse
    progress: ProgressResponse | None = None


class DailyRecommendationResponse(BaseModel):
    """Today's selected problem with the user's progress on it."""

    recommendation_id: UUID
    date: date
    reason: RecommendationReason
    completed: bool
    skipped: bool
    problem: ProblemResponse
    progress: ProgressResponse | None = None


class SubmitRequest(BaseModel):
    """Attempt payload.

    Grading happens outside this service; the client reports how many test
    cases passed. Consistency of the counts is checked by the core and
    reported as a 400.
    """

    code: str = Field(..., description="Submitted source code")
    language: Language = Field(
        default=Language.JAVASCRIPT,
        description="Language of the submission",
    )
    time_taken: float = Field(..., description="Minutes spent on the attempt")
    test_cases_passed: int = Field(..., description="Number of passing test cases")
    total_test_cases: int = Field(..., description="Number of test cases run")
    result: AttemptResult | None = Field(
        default=None,
        description="Outcome qualifier for non-passing attempts (partial, timeout, runtime-error)",
    )

    def to_submission(self) -> AttemptSubmission:
        return AttemptSubmission(
            code=self.code,
            time_taken=self.time_taken,
            test_cases_passed=self.test_cases_passed,
            total_test_cases=self.total_test_cases,
            language=self.language,
            result=self.result,
        )


class SubmitResponse(BaseModel):
    message: str
    result: AttemptResult
    attempt: AttemptResponse
    progress: ProgressResponse
    mastery: TopicMasteryResponse
    first_solve: bool
    recommendation_completed: bool
