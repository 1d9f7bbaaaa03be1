from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

Each ``WardenError`` family maps to one HTTP status. The response body is
``{"detail": <translated message>, "code": <error code>}``, with the message
rendered in the request language.
"""

from typing import Dict, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from warden.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    UpstreamError,
    ValidationError,
    WardenError,
)
from warden.utils.i18n import get_request_language, get_translated_message

__all__ = [
    "STATUS_BY_ERROR",
    "warden_error_handler",
    "unhandled_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)

STATUS_BY_ERROR: Dict[Type[WardenError], int] = {
    ValidationError: 422,
    ConflictError: status.HTTP_409_CONFLICT,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    UpstreamError: status.HTTP_502_BAD_GATEWAY,
}


def _status_for(exc: WardenError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def warden_error_handler(request: Request, exc: WardenError) -> JSONResponse:
    """Translate a ``WardenError`` into its HTTP response.

    Args:
        request: The incoming `Request` object.
        exc: The raised error.

    Returns:
        A `JSONResponse` with the mapped status code. 401 responses carry a
        ``WWW-Authenticate: Bearer`` challenge.
    """
    status_code = _status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_failed",
        error=exc.code,
        status_code=status_code,
        path=request.url.path,
        cause=repr(exc.__cause__) if exc.__cause__ else None,
    )

    language = get_request_language(request)
    detail = get_translated_message(exc.code, language).format(**exc.params)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "code": exc.code},
        headers=headers,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected failure and return a generic 500 without internals."""
    logger.exception("unhandled_error", path=request.url.path, error_type=type(exc).__name__)
    language = get_request_language(request)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": get_translated_message("internal_error", language), "code": "internal_error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers the exception handlers with the FastAPI application.

    Args:
        app: The `FastAPI` application instance.
    """
    app.add_exception_handler(WardenError, warden_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
