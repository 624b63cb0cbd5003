"""Middleware for request processing and observability."""

import time
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger("http")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add a correlation ID to every request and log it.

    - Uses the X-Correlation-Id header if present, otherwise a new UUID4
    - Stores it in request.state.correlation_id
    - Binds it to the structlog context for all logging in the request
    - Adds the X-Correlation-Id response header
    - Logs method, path, status and duration once the response is ready
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request with correlation ID tracking."""
        correlation_id = request.headers.get("X-Correlation-Id", str(uuid4()))

        request.state.correlation_id = correlation_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)

        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            "http_request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
            user_agent=request.headers.get("user-agent", ""),
        )

        response.headers["X-Correlation-Id"] = correlation_id

        return response
