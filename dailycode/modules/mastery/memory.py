"""In-memory topic mastery repository (default store and tests)."""

import copy
from typing import TYPE_CHECKING, Sequence
from uuid import UUID

from dailycode.modules.mastery.interface import TopicMastery
from dailycode.shared.models import Topic

if TYPE_CHECKING:
    from dailycode.shared.unit_of_work import InMemoryDatabase


class InMemoryMasteryRepository:
    """Mastery documents held in a shared dict keyed by (user_id, topic).

    Dict insertion order doubles as creation order; replacing a value keeps
    its position.
    """

    def __init__(self, db: "InMemoryDatabase") -> None:
        self._mastery = db.mastery

    async def get(self, user_id: UUID, topic: Topic) -> TopicMastery | None:
        mastery = self._mastery.get((user_id, topic))
        return copy.deepcopy(mastery) if mastery else None

    async def upsert(self, mastery: TopicMastery) -> TopicMastery:
        existing = self._mastery.get((mastery.user_id, mastery.topic))
        stored = copy.deepcopy(mastery)
        if existing is not None:
            stored.id = existing.id
        self._mastery[(mastery.user_id, mastery.topic)] = stored
        return copy.deepcopy(stored)

    async def list_for_user(self, user_id: UUID) -> Sequence[TopicMastery]:
        return [
            copy.deepcopy(m) for (owner, _), m in self._mastery.items()
            if owner == user_id
        ]
