"""FastAPI application setup and configuration."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dailycode.api.middleware.error_handler import setup_exception_handlers
from dailycode.api.middleware.logging import RequestLoggingMiddleware, configure_logging
from dailycode.jobs.scheduler import get_scheduler
from dailycode.shared.config import get_settings
from dailycode.shared.database import shutdown, startup
from dailycode.shared.feature_flags import is_background_jobs_enabled

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the store on startup and, when background jobs are enabled,
    schedules and starts the batch jobs. Both are stopped on shutdown.
    """
    await startup()

    scheduler = get_scheduler()
    if is_background_jobs_enabled():
        scheduler.schedule_all_default_jobs()
        scheduler.start()

    yield

    scheduler.shutdown(wait=False)
    await shutdown()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title="DailyCode API",
        description="""
        Daily coding practice API:
        - One recommended problem per user per day
        - Attempt submission with progress tracking
        - Topic mastery, streaks and progress statistics
        """,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    cors_origins = settings.cors_origins_list
    if settings.is_production and not cors_origins:
        logger.warning(
            "No CORS_ORIGINS configured in production. "
            "API will not be accessible from browsers."
        )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "Accept",
            "Origin",
            "X-Requested-With",
            "X-Request-ID",
        ],
        max_age=600,
    )

    setup_exception_handlers(application)

    application.add_middleware(RequestLoggingMiddleware)

    from dailycode.api.routers import (
        health_router,
        problems_router,
        progress_router,
        recommendations_router,
    )

    application.include_router(
        health_router,
        prefix="/health",
        tags=["Health"],
    )
    application.include_router(
        problems_router,
        prefix="/problems",
        tags=["Problems"],
    )
    application.include_router(
        recommendations_router,
        prefix="/recommendations",
        tags=["Recommendations"],
    )
    application.include_router(
        progress_router,
        prefix="/progress",
        tags=["Progress"],
    )

    return application


app = create_app()
