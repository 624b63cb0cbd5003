"""Token pair issuance shared by login, refresh, and OAuth callback."""

import structlog

from authapi.exceptions import PersistenceError
from authapi.models.auth import TokenPair
from authapi.models.user import User
from authapi.services.auth_service import AuthService
from authapi.services.token_service import TokenService

logger = structlog.get_logger(__name__)


async def issue_token_pair(
    user: User,
    auth_service: AuthService,
    token_service: TokenService,
) -> TokenPair:
    """Sign a new token pair and persist the refresh token hash.

    Raises:
        PersistenceError: If the token record write is not acknowledged; the
            signed tokens are discarded
    """
    pair = auth_service.create_token_pair(str(user.id), user.role)

    stored = await token_service.store_refresh_token(user.id, pair.refresh_token)
    if not stored:
        raise PersistenceError("Failed to store refresh token")

    return pair
