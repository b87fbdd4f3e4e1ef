"""In-memory progress repository (default store and tests)."""

import copy
from collections import Counter
from datetime import datetime
from typing import TYPE_CHECKING, Literal, Sequence
from uuid import UUID

from dailycode.modules.progress.interface import (
    DailySolveCount,
    GroupSummary,
    Progress,
)
from dailycode.shared.datetime_utils import to_day
from dailycode.shared.exceptions import DuplicateRecordError
from dailycode.shared.models import ProgressStatus, Topic

if TYPE_CHECKING:
    from dailycode.shared.unit_of_work import InMemoryDatabase


class InMemoryProgressRepository:
    """Progress records held in a shared dict keyed by (user_id, problem_id)."""

    def __init__(self, db: "InMemoryDatabase") -> None:
        self._progress = db.progress

    def _for_user(self, user_id: UUID) -> list[Progress]:
        records = [p for p in self._progress.values() if p.user_id == user_id]
        return sorted(records, key=lambda p: (p.created_at, str(p.id)))

    async def get(self, user_id: UUID, problem_id: UUID) -> Progress | None:
        progress = self._progress.get((user_id, problem_id))
        return copy.deepcopy(progress) if progress else None

    async def add(self, progress: Progress) -> Progress:
        key = (progress.user_id, progress.problem_id)
        if key in self._progress:
            raise DuplicateRecordError(
                "Progress",
                {"user_id": progress.user_id, "problem_id": progress.problem_id},
            )
        progress.total_attempts = len(progress.attempts)
        self._progress[key] = copy.deepcopy(progress)
        return copy.deepcopy(progress)

    async def save(self, progress: Progress) -> Progress:
        progress.total_attempts = len(progress.attempts)
        self._progress[(progress.user_id, progress.problem_id)] = copy.deepcopy(progress)
        return copy.deepcopy(progress)

    async def list_for_topic(self, user_id: UUID, topic: Topic) -> Sequence[Progress]:
        return [copy.deepcopy(p) for p in self._for_user(user_id) if p.topic == topic]

    async def list_recent(self, user_id: UUID, limit: int) -> Sequence[Progress]:
        records = sorted(self._for_user(user_id), key=lambda p: p.created_at, reverse=True)
        return [copy.deepcopy(p) for p in records[:limit]]

    async def count_for_user(
        self,
        user_id: UUID,
        status: ProgressStatus | None = None,
        solved_since: datetime | None = None,
    ) -> int:
        return sum(
            1 for p in self._for_user(user_id)
            if (status is None or p.status == status)
            and (solved_since is None or (p.solved_date is not None and p.solved_date >= solved_since))
        )

    async def distinct_topics(self, user_id: UUID) -> list[Topic]:
        return list(dict.fromkeys(p.topic for p in self._for_user(user_id)))

    async def distinct_users_updated_since(self, since: datetime) -> list[UUID]:
        return list(dict.fromkeys(
            p.user_id for p in self._progress.values() if p.updated_at >= since
        ))

    async def summarize(
        self,
        user_id: UUID,
        group_by: Literal["topic", "difficulty"],
    ) -> list[GroupSummary]:
        groups: dict[str, list[Progress]] = {}
        for p in self._for_user(user_id):
            key = p.topic.value if group_by == "topic" else p.difficulty.value
            groups.setdefault(key, []).append(p)
        return [
            GroupSummary(
                key=key,
                attempted=len(records),
                solved=sum(1 for p in records if p.is_solved),
                average_attempts=sum(p.total_attempts for p in records) / len(records),
            )
            for key, records in sorted(groups.items())
        ]

    async def solved_per_day(self, user_id: UUID, since: datetime) -> list[DailySolveCount]:
        counts = Counter(
            to_day(p.solved_date) for p in self._for_user(user_id)
            if p.solved_date is not None and p.solved_date >= since
        )
        return [DailySolveCount(day=day, solved=n) for day, n in sorted(counts.items())]
