"""Exception hierarchy shared by the engine, the API and the CLI.

Every error carries a stable `error_code`; the API maps codes to HTTP
statuses and the CLI prints `message`.
"""

from datetime import date
from typing import Any
from uuid import UUID


class DailyCodeException(Exception):
    """Base exception for all application errors."""

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ===================
# Authentication
# ===================

class AuthenticationError(DailyCodeException):
    """Missing or unusable credentials."""

    error_code = "AUTHENTICATION_ERROR"


class InvalidTokenError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__("Invalid or expired token")


# ===================
# Missing resources
# ===================

class ResourceNotFoundError(DailyCodeException):
    error_code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: UUID | str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            {"resource_type": resource_type, "resource_id": str(resource_id)},
        )


class ProblemNotFoundError(ResourceNotFoundError):
    """The problem does not exist or is inactive."""

    def __init__(self, problem_id: UUID) -> None:
        super().__init__("Problem", problem_id)


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: UUID) -> None:
        super().__init__("User", user_id)


class RecommendationNotFoundError(ResourceNotFoundError):
    """The user has no daily recommendation for the day."""

    def __init__(self, user_id: UUID, day: date) -> None:
        super().__init__("DailyRecommendation", f"{user_id}@{day.isoformat()}")


class NoActiveProblemsError(ResourceNotFoundError):
    """The catalog holds no active problem at all, so nothing can be recommended."""

    def __init__(self) -> None:
        super().__init__("Problem", "any active problem")


# ===================
# State conflicts
# ===================

class InvalidStateError(DailyCodeException):
    """The operation conflicts with the record's current state."""

    error_code = "CONFLICT"


class DuplicateRecordError(InvalidStateError):
    """An insert hit a uniqueness rule.

    Callers inside the engine resolve this by re-reading the existing record.
    """

    def __init__(self, resource_type: str, key: dict[str, Any]) -> None:
        super().__init__(
            f"{resource_type} already exists",
            {"resource_type": resource_type, "key": {k: str(v) for k, v in key.items()}},
        )


class RecommendationAlreadyClosedError(InvalidStateError):
    """Completing a skipped recommendation, or skipping a completed one."""

    def __init__(self, user_id: UUID, day: date, state: str) -> None:
        super().__init__(
            f"Recommendation for {day.isoformat()} is already {state}",
            {"user_id": str(user_id), "date": day.isoformat(), "state": state},
        )


# ===================
# Invalid input
# ===================

class ValidationError(DailyCodeException):
    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Validation error for '{field}': {message}", {"field": field})


class InvalidTopicError(ValidationError):
    def __init__(self, value: Any) -> None:
        super().__init__("topic", f"Unknown topic {value!r}")


class InvalidDifficultyError(ValidationError):
    def __init__(self, value: Any) -> None:
        super().__init__("difficulty", f"Unknown difficulty {value!r}")


class InvalidAttemptError(ValidationError):
    """A submitted attempt is missing fields or its counts disagree."""


class InvalidFeedbackError(ValidationError):
    """Recommendation feedback is out of range."""


# ===================
# Infrastructure
# ===================

class StoreUnavailableError(DailyCodeException):
    """The configured store could not be reached or failed mid-transaction."""

    error_code = "STORE_UNAVAILABLE"

    def __init__(self, message: str) -> None:
        super().__init__(f"Store unavailable: {message}", {"service": "store"})
