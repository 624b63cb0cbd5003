"""Exception handlers rendering every failure as {error, detail, correlation_id}."""

from typing import Optional
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authapi.exceptions import AppError

logger = structlog.get_logger(__name__)


def error_body(
    request: Request,
    status_code: int,
    error: str,
    detail: str,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Build the error response and echo the request's correlation id."""
    correlation_id = getattr(request.state, "correlation_id", None) or str(uuid4())
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "detail": detail, "correlation_id": correlation_id},
        headers={"X-Correlation-Id": correlation_id, **(headers or {})},
    )


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "request_failed",
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        detail=exc.detail,
    )

    # RFC 6750: 401 responses name the scheme the client should use
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return error_body(request, exc.status_code, exc.error, exc.detail, headers)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first invalid field as a 400."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ["unknown"]))
        detail = f"Field '{field}': {first.get('msg', 'Validation failed')}"
    else:
        detail = "Request validation failed"

    logger.warning("validation_error", detail=detail, error_count=len(errors))
    return error_body(request, status.HTTP_400_BAD_REQUEST, "Validation error", detail)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", error_type=type(exc).__name__, exc_info=exc)
    return error_body(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected)
