"""Mastery Module - Per-topic proficiency derived from attempt history."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, Sequence
from uuid import UUID, uuid4

from dailycode.shared.datetime_utils import utc_now
from dailycode.shared.models import Difficulty, Topic

TIERS: tuple[Difficulty, ...] = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)


def empty_tiers() -> dict[str, int]:
    """Zeroed per-tier counters keyed by difficulty value."""
    return {tier.value: 0 for tier in TIERS}


def empty_rates() -> dict[str, float]:
    """Zeroed per-tier rates plus the overall rate."""
    rates = {tier.value: 0.0 for tier in TIERS}
    rates["overall"] = 0.0
    return rates


@dataclass
class TopicMastery:
    """Mastery snapshot of one user in one topic.

    All tier maps are keyed by the difficulty wire value. The document is
    always rebuilt from the user's progress records, never patched.
    """

    user_id: UUID
    topic: Topic
    id: UUID = field(default_factory=uuid4)
    problems_attempted: dict[str, int] = field(default_factory=empty_tiers)
    problems_solved: dict[str, int] = field(default_factory=empty_tiers)
    success_rates: dict[str, float] = field(default_factory=empty_rates)
    average_attempts: dict[str, float] = field(
        default_factory=lambda: {tier.value: 0.0 for tier in TIERS}
    )
    mastery_level: int = 0
    recommended_difficulty: Difficulty = Difficulty.EASY
    last_updated: datetime = field(default_factory=utc_now)

    @property
    def total_attempted(self) -> int:
        return sum(self.problems_attempted.values())

    @property
    def total_solved(self) -> int:
        return sum(self.problems_solved.values())


@dataclass
class FocusTopic:
    topic: Topic
    mastery_level: int
    recommended_difficulty: Difficulty
    reason: str


@dataclass
class MasteryOverview:
    """All of a user's topic masteries with the topics worth focusing on."""

    overall_mastery: int
    topics: list[TopicMastery]
    focus_topics: list[FocusTopic]


@dataclass
class SweepResult:
    users: int = 0
    topics_recomputed: int = 0
    errors: list[str] = field(default_factory=list)


class IMasteryRepository(Protocol):
    """Store operations over topic mastery documents."""

    async def get(self, user_id: UUID, topic: Topic) -> TopicMastery | None:
        """Get the mastery document for a user and topic."""
        ...

    async def upsert(self, mastery: TopicMastery) -> TopicMastery:
        """Insert or wholesale-replace the document for (user_id, topic)."""
        ...

    async def list_for_user(self, user_id: UUID) -> Sequence[TopicMastery]:
        """A user's mastery documents in creation order."""
        ...
