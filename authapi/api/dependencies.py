"""FastAPI dependencies for authentication and authorization guards."""

from typing import Callable, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from authapi.exceptions import ForbiddenError, InvalidTokenError
from authapi.models.user import Role, User
from authapi.services.auth_service import AuthService
from authapi.services.token_service import TokenService
from authapi.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def _bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> str:
    if credentials is None or not credentials.credentials:
        raise InvalidTokenError("Not authenticated")
    return credentials.credentials


def _subject(payload: dict) -> UUID:
    try:
        return UUID(str(payload.get("sub")))
    except ValueError:
        raise InvalidTokenError("Invalid token payload")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """Resolve the principal from a Bearer access token.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Authenticated User model

    Raises:
        InvalidTokenError: Missing, invalid, or expired token, or unknown user
    """
    token = _bearer_token(credentials)
    payload = AuthService().validate_access_token(token)
    user_id = _subject(payload)

    user = await UserService().get_by_id(user_id)
    if user is None:
        raise InvalidTokenError("User not found")

    return user


async def get_refresh_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UUID:
    """Authenticate a request carrying a Bearer refresh token.

    The token must be correctly signed with the refresh secret, unexpired,
    and match the hash currently stored for its subject.

    Returns:
        UUID of the token subject

    Raises:
        InvalidTokenError: Token is invalid, cleared by logout, superseded, or locked
    """
    token = _bearer_token(credentials)
    payload = AuthService().validate_refresh_token(token)
    user_id = _subject(payload)

    if not await TokenService().verify_refresh_token(user_id, token):
        raise InvalidTokenError("Invalid or expired refresh token")

    return user_id


def require_roles(*roles: Role) -> Callable:
    """Build a dependency that admits only users holding one of ``roles``."""
    allowed = set(roles)

    async def role_guard(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise ForbiddenError(
                f"Requires role: {', '.join(sorted(r.value for r in allowed))}"
            )
        return current_user

    return role_guard


require_admin = require_roles(Role.ADMIN)
