"""Request logging and log configuration.

Every log line written while a request is being handled carries its request
id, including lines from services and repositories, via `request_id_var`.
"""

from contextvars import ContextVar
import logging
import re
import time
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from dailycode.shared.config import get_settings

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

# Client supplied request ids are only trusted when they look like ids
_REQUEST_ID_PATTERN = re.compile(r"^[a-zA-Z0-9\-_]{1,64}$")


class RequestContextFilter(logging.Filter):
    """Stamps each record with the id of the request being handled."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns a request id, echoes it back and logs each request's outcome."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("X-Request-ID")
        if not request_id or not _REQUEST_ID_PATTERN.match(request_id):
            request_id = str(uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"{request.method} {request.url.path} raised after "
                f"{self._elapsed_ms(start_time)}ms"
            )
            raise
        else:
            response.headers["X-Request-ID"] = request_id
            # Set by the auth dependency once the token is verified
            user_id = getattr(request.state, "user_id", None)
            logger.log(
                logging.WARNING if response.status_code >= 400 else logging.INFO,
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"in {self._elapsed_ms(start_time)}ms",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "user_id": str(user_id) if user_id else None,
                    "client_ip": self._get_client_ip(request),
                },
            )
            return response
        finally:
            request_id_var.reset(token)

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.perf_counter() - start_time) * 1000, 2)

    @staticmethod
    def _get_client_ip(request: Request) -> str:
        """Client IP, honouring the first hop of X-Forwarded-For."""
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        if request.client:
            return request.client.host
        return "unknown"


def configure_logging(level: str | None = None) -> None:
    """Configure application logging.

    JSON lines in production, human-readable lines elsewhere. The level
    defaults to LOG_LEVEL from settings.
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    if settings.is_production:
        log_format = (
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
            '"logger": "%(name)s", "request_id": "%(request_id)s", '
            '"message": "%(message)s"}'
        )
    else:
        log_format = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"

    logging.basicConfig(level=log_level, format=log_format, datefmt="%Y-%m-%dT%H:%M:%S%z")

    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestContextFilter) for f in handler.filters):
            handler.addFilter(RequestContextFilter())

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
