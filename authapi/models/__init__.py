"""Models package exports."""

from authapi.models.auth import (
    CreateUserRequest,
    LoginRequest,
    MeResponse,
    OAuthProfile,
    ProfileResponse,
    RegisterRequest,
    TokenPair,
    UserSummary,
)
from authapi.models.user import Role, TokenRecord, User

__all__ = [
    "CreateUserRequest",
    "LoginRequest",
    "MeResponse",
    "OAuthProfile",
    "ProfileResponse",
    "RegisterRequest",
    "Role",
    "TokenPair",
    "TokenRecord",
    "User",
    "UserSummary",
]
