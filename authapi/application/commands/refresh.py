"""Refresh command: re-issue a token pair for a refresh-authenticated user."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

import structlog

from authapi.application.commands.issue_tokens import issue_token_pair
from authapi.exceptions import InvalidTokenError
from authapi.models.auth import TokenPair
from authapi.services.auth_service import AuthService
from authapi.services.token_service import TokenService
from authapi.services.user_service import UserService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RefreshCommand:
    user_id: UUID


class RefreshHandler:
    """Issue a new pair; storing its hash retires the presented refresh token."""

    def __init__(
        self,
        user_service: Optional[UserService] = None,
        auth_service: Optional[AuthService] = None,
        token_service: Optional[TokenService] = None,
    ) -> None:
        self.user_service = user_service or UserService()
        self.auth_service = auth_service or AuthService()
        self.token_service = token_service or TokenService()

    async def execute(self, command: RefreshCommand) -> TokenPair:
        """Rotate the user's tokens.

        Raises:
            InvalidTokenError: The token subject no longer exists
            PersistenceError: Refresh token hash was not stored
        """
        user = await self.user_service.get_by_id(command.user_id)
        if user is None:
            raise InvalidTokenError("User not found")

        pair = await issue_token_pair(user, self.auth_service, self.token_service)

        logger.info("tokens_refreshed", user_id=str(user.id))
        return pair
