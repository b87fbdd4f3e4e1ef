"""Closed enumerations and their wire parsers shared across modules."""

from enum import Enum

from dailycode.shared.exceptions import InvalidDifficultyError, InvalidTopicError


class Topic(str, Enum):
    """Algorithmic topic of a problem."""

    STACK = "stack"
    QUEUE = "queue"
    LINKED_LIST = "linked-list"
    TREES = "trees"
    GRAPHS = "graphs"
    DYNAMIC_PROGRAMMING = "dynamic-programming"
    ARRAYS = "arrays"
    STRINGS = "strings"
    SORTING = "sorting"
    SEARCHING = "searching"


class Difficulty(str, Enum):
    """Difficulty tier of a problem."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ProgressStatus(str, Enum):
    """Derived status of a user's progress on one problem."""

    NOT_ATTEMPTED = "not-attempted"
    ATTEMPTED = "attempted"
    SOLVED = "solved"
    SKIPPED = "skipped"


class AttemptResult(str, Enum):
    """Grading outcome reported for a single attempt."""

    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"
    TIMEOUT = "timeout"
    RUNTIME_ERROR = "runtime-error"


class Language(str, Enum):
    """Languages a solution may be submitted in."""

    JAVASCRIPT = "javascript"
    PYTHON = "python"
    JAVA = "java"
    CPP = "cpp"
    C = "c"


class RecommendationReason(str, Enum):
    """Why a problem was placed on a daily recommendation."""

    NEW_TOPIC = "new_topic"
    REINFORCE_WEAK = "reinforce_weak"
    PROGRESSION = "progression"
    RANDOM = "random"
    STREAK_MAINTENANCE = "streak_maintenance"
    DAILY_RECOMMENDATION = "daily_recommendation"


class SkillLevel(str, Enum):
    """Self-reported skill level of a user."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


def parse_topic(value: "Topic | str") -> Topic:
    """Convert a wire value to a Topic, rejecting anything outside the set.

    Raises:
        InvalidTopicError: If value is not one of the ten topics
    """
    if isinstance(value, Topic):
        return value
    try:
        return Topic(value)
    except ValueError:
        raise InvalidTopicError(value) from None


def parse_difficulty(value: "Difficulty | str") -> Difficulty:
    """Convert a wire value to a Difficulty, rejecting anything outside the set.

    Raises:
        InvalidDifficultyError: If value is not easy, medium or hard
    """
    if isinstance(value, Difficulty):
        return value
    try:
        return Difficulty(value)
    except ValueError:
        raise InvalidDifficultyError(value) from None
