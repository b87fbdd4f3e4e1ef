"""In-memory daily recommendation repository (default store and tests)."""

import copy
from datetime import date
from typing import TYPE_CHECKING, Sequence
from uuid import UUID

from dailycode.modules.recommendation.interface import DailyRecommendation
from dailycode.shared.exceptions import DuplicateRecordError, RecommendationNotFoundError

if TYPE_CHECKING:
    from dailycode.shared.unit_of_work import InMemoryDatabase


class InMemoryRecommendationRepository:
    """Recommendations held in a shared dict keyed by (user_id, date)."""

    def __init__(self, db: "InMemoryDatabase") -> None:
        self._recommendations = db.recommendations

    async def get(self, user_id: UUID, day: date) -> DailyRecommendation | None:
        rec = self._recommendations.get((user_id, day))
        return copy.deepcopy(rec) if rec else None

    async def add(self, recommendation: DailyRecommendation) -> DailyRecommendation:
        key = (recommendation.user_id, recommendation.date)
        if key in self._recommendations:
            raise DuplicateRecordError(
                "DailyRecommendation",
                {"user_id": recommendation.user_id, "date": recommendation.date},
            )
        self._recommendations[key] = copy.deepcopy(recommendation)
        return copy.deepcopy(recommendation)

    async def save(self, recommendation: DailyRecommendation) -> DailyRecommendation:
        key = (recommendation.user_id, recommendation.date)
        if key not in self._recommendations:
            raise RecommendationNotFoundError(recommendation.user_id, recommendation.date)
        self._recommendations[key] = copy.deepcopy(recommendation)
        return copy.deepcopy(recommendation)

    async def exists(self, user_id: UUID, day: date) -> bool:
        return (user_id, day) in self._recommendations

    async def list_between(self, user_id: UUID, start: date, end: date) -> Sequence[DailyRecommendation]:
        matches = [
            rec for (owner, day), rec in self._recommendations.items()
            if owner == user_id and start <= day <= end
        ]
        matches.sort(key=lambda rec: rec.date, reverse=True)
        return [copy.deepcopy(rec) for rec in matches]

    async def delete_before(self, day: date) -> int:
        stale = [key for key in self._recommendations if key[1] < day]
        for key in stale:
            del self._recommendations[key]
        return len(stale)

    async def count_completed_since(self, day: date) -> int:
        return sum(
            1 for rec in self._recommendations.values()
            if rec.date >= day and rec.completed
        )
