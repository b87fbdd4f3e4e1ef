"""API middleware package."""

from dailycode.api.middleware.auth import get_current_user_id
from dailycode.api.middleware.error_handler import setup_exception_handlers
from dailycode.api.middleware.logging import RequestLoggingMiddleware, configure_logging

__all__ = [
    "RequestLoggingMiddleware",
    "configure_logging",
    "get_current_user_id",
    "setup_exception_handlers",
]
