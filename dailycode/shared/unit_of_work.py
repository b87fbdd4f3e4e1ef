"""Unit of Work implementations for the SQL and in-memory stores.

Both expose the same repositories, so services written against
`UnitOfWork` run unchanged on either store. Which one the application uses
is decided by the service registry from FF_USE_DATABASE_PERSISTENCE.
"""

import logging
from collections.abc import Iterator, MutableMapping
from datetime import date
from types import SimpleNamespace
from typing import Any
from uuid import UUID

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dailycode.modules.mastery.interface import TopicMastery
from dailycode.modules.mastery.memory import InMemoryMasteryRepository
from dailycode.modules.mastery.repository import MasteryRepository
from dailycode.modules.problems.interface import Problem
from dailycode.modules.problems.memory import InMemoryProblemRepository
from dailycode.modules.problems.repository import ProblemRepository
from dailycode.modules.progress.interface import Progress
from dailycode.modules.progress.memory import InMemoryProgressRepository
from dailycode.modules.progress.repository import ProgressRepository
from dailycode.modules.recommendation.interface import DailyRecommendation
from dailycode.modules.recommendation.memory import InMemoryRecommendationRepository
from dailycode.modules.recommendation.repository import RecommendationRepository
from dailycode.modules.user.interface import User
from dailycode.modules.user.memory import InMemoryUserRepository
from dailycode.modules.user.repository import UserRepository
from dailycode.shared.database import get_session_factory
from dailycode.shared.exceptions import StoreUnavailableError
from dailycode.shared.models import Topic
from dailycode.shared.repository import UnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)


# Driver-level failures that mean the store itself could not be reached
_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError, OSError)


class SqlUnitOfWork(UnitOfWork):
    """Unit of work over one SQLAlchemy async session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory or get_session_factory()
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> "SqlUnitOfWork":
        self._session = self._session_factory()
        self.problems = ProblemRepository(self._session)
        self.progress = ProgressRepository(self._session)
        self.mastery = MasteryRepository(self._session)
        self.recommendations = RecommendationRepository(self._session)
        self.users = UserRepository(self._session)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            await super().__aexit__(exc_type, exc_val, exc_tb)
        except _UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError(str(e)) from e
        finally:
            await self._session.close()

        if exc_type is not None and issubclass(exc_type, _UNAVAILABLE_ERRORS):
            raise StoreUnavailableError(str(exc_val)) from exc_val

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()


_MISSING = object()


class UndoLog:
    """Values a unit of work replaced, recorded once per (collection, key)."""

    def __init__(self) -> None:
        self._entries: list[tuple[dict, Any, Any]] = []
        self._seen: set[tuple[int, Any]] = set()

    def __bool__(self) -> bool:
        return bool(self._entries)

    def remember(self, collection: dict, key: Any) -> None:
        marker = (id(collection), key)
        if marker not in self._seen:
            self._seen.add(marker)
            self._entries.append((collection, key, collection.get(key, _MISSING)))

    def undo(self) -> None:
        """Put every recorded key back, newest write first."""
        for collection, key, previous in reversed(self._entries):
            if previous is _MISSING:
                collection.pop(key, None)
            else:
                collection[key] = previous
        self.clear()

    def clear(self) -> None:
        self._entries.clear()
        self._seen.clear()


class JournaledCollection(MutableMapping):
    """Write-through view of one shared collection that logs into an UndoLog.

    Repositories replace stored values rather than mutate them, so the
    logged value is still the pre-write state at rollback.
    """

    def __init__(self, data: dict, log: UndoLog) -> None:
        self._data = data
        self._log = log

    def __getitem__(self, key: Any) -> Any:
        return self._data[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._log.remember(self._data, key)
        self._data[key] = value

    def __delitem__(self, key: Any) -> None:
        self._log.remember(self._data, key)
        del self._data[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


class InMemoryDatabase:
    """Dict-backed collections keyed by each entity's unique key."""

    def __init__(self) -> None:
        self.problems: dict[UUID, Problem] = {}
        self.progress: dict[tuple[UUID, UUID], Progress] = {}
        self.mastery: dict[tuple[UUID, Topic], TopicMastery] = {}
        self.recommendations: dict[tuple[UUID, date], DailyRecommendation] = {}
        self.users: dict[UUID, User] = {}

    def journaled(self, log: UndoLog) -> SimpleNamespace:
        """Views of every collection that record their writes in `log`."""
        return SimpleNamespace(
            problems=JournaledCollection(self.problems, log),
            progress=JournaledCollection(self.progress, log),
            mastery=JournaledCollection(self.mastery, log),
            recommendations=JournaledCollection(self.recommendations, log),
            users=JournaledCollection(self.users, log),
        )


class InMemoryUnitOfWork(UnitOfWork):
    """Unit of work over an InMemoryDatabase.

    Writes land immediately. Rollback puts back the previous value of each
    key this unit of work wrote and leaves every other key alone, including
    keys committed meanwhile by other units of work.
    """

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db
        self._log = UndoLog()
        view = db.journaled(self._log)
        self.problems = InMemoryProblemRepository(view)
        self.progress = InMemoryProgressRepository(view)
        self.mastery = InMemoryMasteryRepository(view)
        self.recommendations = InMemoryRecommendationRepository(view)
        self.users = InMemoryUserRepository(view)

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        self._log.clear()
        return self

    async def commit(self) -> None:
        self._log.clear()

    async def rollback(self) -> None:
        if self._log:
            self._log.undo()
            logger.debug("In-memory unit of work rolled back")


def sql_unit_of_work_factory(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> UnitOfWorkFactory:
    """Factory producing a fresh SqlUnitOfWork per call."""
    return lambda: SqlUnitOfWork(session_factory)


def memory_unit_of_work_factory(db: InMemoryDatabase) -> UnitOfWorkFactory:
    """Factory producing InMemoryUnitOfWork instances sharing one database."""
    return lambda: InMemoryUnitOfWork(db)
