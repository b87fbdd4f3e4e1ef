"""Database connection and session management for PostgreSQL."""

import asyncio
import importlib
import logging

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from dailycode.shared.config import get_settings
from dailycode.shared.feature_flags import is_database_persistence_enabled

logger = logging.getLogger(__name__)


# Modules whose mapped classes make up the schema
MODEL_MODULES = (
    "dailycode.modules.user.models",
    "dailycode.modules.problems.models",
    "dailycode.modules.progress.models",
    "dailycode.modules.mastery.models",
    "dailycode.modules.recommendation.models",
)


class Base(DeclarativeBase):
    """Base class for all database models."""

    # Unnamed constraints and indexes still get stable names for migrations
    metadata = MetaData(naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_N_name)s",
        "uq": "uq_%(table_name)s_%(column_0_N_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    })


# Store engine per event loop ID to avoid cross-loop connection issues
_engines: dict[int, AsyncEngine] = {}
_session_factories: dict[int, async_sessionmaker[AsyncSession]] = {}


def _get_loop_id() -> int:
    """Get current event loop ID for tracking connections."""
    try:
        loop = asyncio.get_running_loop()
        return id(loop)
    except RuntimeError:
        return 0


def get_engine() -> AsyncEngine:
    """Get SQLAlchemy async engine for current event loop."""
    loop_id = _get_loop_id()

    if _engines.get(loop_id) is None:
        settings = get_settings()
        _engines[loop_id] = create_async_engine(
            settings.database_url,
            echo=False,
            pool_pre_ping=True,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
        )
    return _engines[loop_id]


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get SQLAlchemy session factory for current event loop."""
    loop_id = _get_loop_id()

    if _session_factories.get(loop_id) is None:
        _session_factories[loop_id] = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factories[loop_id]


async def init_db() -> None:
    """Create all tables.

    Call this on application startup in development. In production,
    run migrations instead.
    """
    for module in MODEL_MODULES:
        importlib.import_module(module)

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of every engine created by this process."""
    for loop_id, engine in list(_engines.items()):
        try:
            await engine.dispose()
        except Exception as e:
            logger.warning(f"Error disposing engine for loop {loop_id}: {e}")
    _engines.clear()
    _session_factories.clear()


# ===================
# Lifecycle Helpers
# ===================


async def check_db_health(max_retries: int = 3, retry_delay: float = 1.0) -> bool:
    """Check database health with retries.

    Args:
        max_retries: Maximum number of retry attempts
        retry_delay: Delay between retries in seconds

    Returns:
        True if database is healthy, False otherwise
    """
    for attempt in range(max_retries):
        try:
            engine = get_engine()
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.debug("Database health check passed")
            return True
        except Exception as e:
            logger.warning(f"Database health check failed (attempt {attempt + 1}/{max_retries}): {e}")
            if attempt < max_retries - 1:
                await asyncio.sleep(retry_delay)
    return False


async def get_health_status() -> dict:
    """Get health status of the configured store.

    Returns:
        Dictionary with health status of the store in use
    """
    if not is_database_persistence_enabled():
        return {
            "store": {"healthy": True, "type": "memory"},
            "overall": True,
        }

    db_healthy = await check_db_health(max_retries=1, retry_delay=0)
    return {
        "store": {"healthy": db_healthy, "type": "postgresql"},
        "overall": db_healthy,
    }


async def startup() -> None:
    """Initialize connections on application startup."""
    if not is_database_persistence_enabled():
        logger.info("Database persistence disabled, using in-memory store")
        return

    if not await check_db_health(max_retries=5, retry_delay=2.0):
        raise RuntimeError("Failed to connect to database after retries")

    if get_settings().is_development:
        await init_db()

    logger.info("Database connection initialized successfully")


async def shutdown() -> None:
    """Close all connections on application shutdown."""
    await close_db()
    logger.info("All database connections closed")
