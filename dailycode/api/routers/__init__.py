"""API routers package."""

from dailycode.api.routers.health import router as health_router
from dailycode.api.routers.problems import router as problems_router
from dailycode.api.routers.progress import router as progress_router
from dailycode.api.routers.recommendations import router as recommendations_router

__all__ = [
    "health_router",
    "problems_router",
    "progress_router",
    "recommendations_router",
]
