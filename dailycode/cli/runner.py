"""Event loop handling for the synchronous CLI commands."""

import asyncio
import atexit
import logging
from typing import Any, Coroutine, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

# One loop for the whole CLI run so database engines are reused across calls
_cli_loop: asyncio.AbstractEventLoop | None = None


def _get_cli_loop() -> asyncio.AbstractEventLoop:
    """Get or create the CLI event loop."""
    global _cli_loop
    if _cli_loop is None or _cli_loop.is_closed():
        _cli_loop = asyncio.new_event_loop()
        asyncio.set_event_loop(_cli_loop)
    return _cli_loop


def _cleanup_loop() -> None:
    """Close database connections and the loop at exit."""
    global _cli_loop
    if _cli_loop is None or _cli_loop.is_closed():
        return
    try:
        from dailycode.shared.database import close_db

        _cli_loop.run_until_complete(close_db())
    except Exception as e:
        logger.warning(f"Error closing database connections: {e}")
    finally:
        _cli_loop.close()
        _cli_loop = None


atexit.register(_cleanup_loop)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Helper to run async functions in sync context."""
    return _get_cli_loop().run_until_complete(coro)
