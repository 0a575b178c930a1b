"""Exception handlers rendering the API's ``{error, message, path}`` envelope."""

from typing import Any

import structlog
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException

logger = structlog.get_logger(__name__)


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: Any,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, **extra, "path": str(request.url)},
        headers=headers,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle application exceptions raised by services and dependencies.

    The message is meant for the caller and is returned verbatim.
    """
    logger.info(
        "request_rejected",
        method=request.method,
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.__class__.__name__,
        reason=exc.message,
    )
    return _error_response(request, exc.status_code, exc.__class__.__name__, exc.message)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """
    Handle a uniqueness violation that escaped the service layer.

    Services map the expected races (duplicate email, second provider
    profile) themselves; anything reaching here is still a conflict, not
    a server error.
    """
    logger.warning(
        "integrity_conflict",
        method=request.method,
        path=request.url.path,
        detail=str(exc.orig),
    )
    return _error_response(
        request, status.HTTP_409_CONFLICT, "ConflictException", "Resource already exists"
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Handle routing-level HTTP errors such as 404 and 405."""
    return _error_response(
        request,
        exc.status_code,
        "HTTPException",
        exc.detail,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle request bodies or parameters of the wrong shape.

    Args:
        request: Request object
        exc: Validation exception

    Returns:
        JSON error response with validation details
    """
    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "ValidationError",
        "Request validation failed",
        details=jsonable_encoder(exc.errors()),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected exception and hide its internals from the caller."""
    logger.error(
        "unhandled_exception",
        method=request.method,
        path=request.url.path,
        error_type=exc.__class__.__name__,
        exc_info=exc,
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "InternalServerError",
        "An unexpected error occurred",
    )
