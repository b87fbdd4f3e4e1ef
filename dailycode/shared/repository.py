"""Base repository pattern for data access.

This module provides a base repository class for the SQLAlchemy-backed
repositories and the unit-of-work contract every service talks to, so the
recommendation engine never depends on a specific storage technology.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Generic, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dailycode.shared.database import Base
from dailycode.shared.exceptions import DuplicateRecordError

if TYPE_CHECKING:
    from dailycode.modules.mastery.interface import IMasteryRepository
    from dailycode.modules.problems.interface import IProblemRepository
    from dailycode.modules.progress.interface import IProgressRepository
    from dailycode.modules.recommendation.interface import IRecommendationRepository
    from dailycode.modules.user.interface import IUserRepository

# Generic type for SQLAlchemy models
ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(ABC, Generic[ModelT]):
    """Base repository providing common write helpers.

    All SQLAlchemy repositories inherit from this class and translate
    between ORM rows and the module's domain dataclasses.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session

    @property
    @abstractmethod
    def _model_class(self) -> type[ModelT]:
        """Return the SQLAlchemy model class for this repository."""
        pass

    async def _insert_unique(self, row: ModelT, key: dict) -> ModelT:
        """Insert a row, reporting a uniqueness violation as DuplicateRecordError.

        The insert runs inside a SAVEPOINT so the surrounding transaction
        stays usable and the caller can re-read the conflicting row.

        Raises:
            DuplicateRecordError: If a row with the same unique key exists
        """
        try:
            async with self._session.begin_nested():
                self._session.add(row)
                await self._session.flush()
        except IntegrityError as e:
            raise DuplicateRecordError(self._model_class.__name__.removesuffix("Model"), key) from e
        await self._session.refresh(row)
        return row

    async def _flush(self, row: ModelT) -> ModelT:
        """Flush pending changes on an already-tracked row."""
        await self._session.flush()
        await self._session.refresh(row)
        return row


class UnitOfWork(ABC):
    """Unit of Work pattern for managing transactions.

    Groups the repositories of one request or one batch item into a single
    transaction with automatic commit/rollback.

    Usage:
        async with uow_factory() as uow:
            progress = await uow.progress.get(user_id, problem_id)
    """

    problems: "IProblemRepository"
    progress: "IProgressRepository"
    mastery: "IMasteryRepository"
    recommendations: "IRecommendationRepository"
    users: "IUserRepository"

    @abstractmethod
    async def commit(self) -> None:
        """Commit the current transaction."""

    @abstractmethod
    async def rollback(self) -> None:
        """Rollback the current transaction."""

    async def __aenter__(self) -> "UnitOfWork":
        """Enter async context."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context with automatic commit/rollback."""
        if exc_type is not None:
            await self.rollback()
        else:
            await self.commit()


UnitOfWorkFactory = Callable[[], UnitOfWork]
