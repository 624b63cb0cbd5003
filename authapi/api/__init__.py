"""API package exports."""

from authapi.api.middleware import CorrelationIdMiddleware
from authapi.api.routes import router

__all__ = ["router", "CorrelationIdMiddleware"]
