"""Services package exports."""

from authapi.services.auth_service import AuthService
from authapi.services.logging_service import configure_logging, get_logger
from authapi.services.token_service import TokenService
from authapi.services.user_service import UserService

__all__ = [
    "AuthService",
    "TokenService",
    "UserService",
    "configure_logging",
    "get_logger",
]
