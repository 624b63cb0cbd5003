"""Login command: password credentials to token pair."""

from dataclasses import dataclass
from typing import Optional

import structlog

from authapi.application.commands.issue_tokens import issue_token_pair
from authapi.exceptions import InvalidCredentialsError
from authapi.models.auth import TokenPair
from authapi.services.auth_service import AuthService
from authapi.services.token_service import TokenService
from authapi.services.user_service import UserService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LoginCommand:
    identifier: str
    password: str


class LoginHandler:
    """Verify credentials and issue a token pair.

    1. Look up the user by email or username
    2. Compare the password with the stored bcrypt hash
    3. Issue tokens and persist the refresh token hash
    """

    def __init__(
        self,
        user_service: Optional[UserService] = None,
        auth_service: Optional[AuthService] = None,
        token_service: Optional[TokenService] = None,
    ) -> None:
        self.user_service = user_service or UserService()
        self.auth_service = auth_service or AuthService()
        self.token_service = token_service or TokenService()

    async def execute(self, command: LoginCommand) -> TokenPair:
        """Run the login flow.

        Raises:
            InvalidCredentialsError: Unknown identifier, OAuth-only account, or wrong password
            PersistenceError: Refresh token hash was not stored
        """
        result = await self.user_service.get_by_identifier(command.identifier)

        if result is None:
            logger.warning("login_failed", reason="user_not_found")
            raise InvalidCredentialsError()

        user, password_hash = result

        if password_hash is None:
            logger.warning("login_failed", reason="no_password", user_id=str(user.id))
            raise InvalidCredentialsError()

        if not self.auth_service.verify_password(command.password, password_hash):
            logger.warning("login_failed", reason="bad_password", user_id=str(user.id))
            raise InvalidCredentialsError()

        pair = await issue_token_pair(user, self.auth_service, self.token_service)

        logger.info("user_logged_in", user_id=str(user.id))
        return pair
