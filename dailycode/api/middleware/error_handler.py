"""Exception handlers that render every error in one JSON envelope.

    {"success": false,
     "error": {"code": ..., "message": ..., "details": {...}},
     "request_id": ..., "timestamp": ...}
"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dailycode.api.middleware.logging import request_id_var
from dailycode.shared.config import get_settings
from dailycode.shared.exceptions import DailyCodeException

logger = logging.getLogger(__name__)

# Keyed by DailyCodeException.error_code; anything else is a 500
HTTP_STATUS_BY_CODE: dict[str, int] = {
    "AUTHENTICATION_ERROR": status.HTTP_401_UNAUTHORIZED,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "STORE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}

_HTTP_ERROR_CODES: dict[int, str] = {
    status.HTTP_401_UNAUTHORIZED: "AUTHENTICATION_ERROR",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def error_body(error_code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "success": False,
        "error": {
            "code": error_code,
            "message": message,
            "details": details or {},
        },
        "request_id": request_id_var.get(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the handlers on `app`."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed request bodies and out-of-range query parameters."""
        errors = [
            {
                "field": " -> ".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        logger.warning(f"Rejected request to {request.url.path}: {len(errors)} invalid field(s)")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=error_body("VALIDATION_ERROR", "Request validation failed", {"errors": errors}),
        )

    @app.exception_handler(DailyCodeException)
    async def domain_exception_handler(
        request: Request, exc: DailyCodeException
    ) -> JSONResponse:
        status_code = HTTP_STATUS_BY_CODE.get(exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        logger.log(
            logging.ERROR if status_code >= 500 else logging.WARNING,
            f"{exc.__class__.__name__} on {request.url.path}: {exc.message}",
        )
        headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
        return JSONResponse(
            status_code=status_code,
            content=error_body(exc.error_code, exc.message, exc.details),
            headers=headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Routing errors such as unknown paths, in the same envelope."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(_HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"), str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled {type(exc).__name__} on {request.url.path}",
            exc_info=exc,
        )
        # Internal errors are only echoed back in development
        message = str(exc) if get_settings().is_development else "Internal server error"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("INTERNAL_ERROR", message),
        )
