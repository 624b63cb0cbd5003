"""OAuth callback command.

Steps of the callback leg of the login flow:
1. consume the state (usable once)
2. exchange the code and read the provider profile
3. find the user by email, or create one without a password
4. issue tokens exactly as password login does
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from authapi.application import events
from authapi.application.commands.issue_tokens import issue_token_pair
from authapi.exceptions import OAuthProviderError, OAuthStateError, UserAlreadyExistsError
from authapi.models.auth import OAuthProfile, TokenPair
from authapi.models.user import User
from authapi.services.auth_service import AuthService
from authapi.services.oauth_service import GoogleOAuthService
from authapi.services.redis_service import RedisService
from authapi.services.token_service import TokenService
from authapi.services.user_service import UserService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OAuthCallbackCommand:
    code: str
    state: str
    provider: str = "google"


@dataclass(frozen=True)
class OAuthCallbackResult:
    user: User
    tokens: TokenPair
    is_new_user: bool


class OAuthCallbackHandler:
    def __init__(
        self,
        oauth_service: Optional[GoogleOAuthService] = None,
        redis_service: Optional[RedisService] = None,
        user_service: Optional[UserService] = None,
        auth_service: Optional[AuthService] = None,
        token_service: Optional[TokenService] = None,
    ) -> None:
        self.oauth_service = oauth_service or GoogleOAuthService()
        self.redis_service = redis_service or RedisService()
        self.user_service = user_service or UserService()
        self.auth_service = auth_service or AuthService()
        self.token_service = token_service or TokenService()

    async def execute(self, command: OAuthCallbackCommand) -> OAuthCallbackResult:
        """Complete an OAuth login.

        Raises:
            OAuthStateError: Unknown, expired, reused, or mismatched state
            OAuthProviderError: Code exchange or profile lookup failed
            PersistenceError: Refresh token hash was not stored
        """
        issued_for = await self.redis_service.consume_oauth_state(command.state)
        if issued_for is None:
            raise OAuthStateError()
        if issued_for != command.provider:
            raise OAuthStateError("OAuth state provider mismatch")

        profile = await self.oauth_service.fetch_profile(command.code)
        if not profile.email:
            raise OAuthProviderError(command.provider, "Profile has no email address")

        user, is_new_user = await self._get_or_create_user(profile)
        tokens = await issue_token_pair(user, self.auth_service, self.token_service)

        logger.info(
            "oauth_login_succeeded",
            user_id=str(user.id),
            provider=command.provider,
            is_new_user=is_new_user,
        )
        return OAuthCallbackResult(user=user, tokens=tokens, is_new_user=is_new_user)

    async def _get_or_create_user(self, profile: OAuthProfile) -> tuple[User, bool]:
        email = profile.email.strip().lower()

        user = await self.user_service.get_by_email(email)
        if user is not None:
            return user, False

        try:
            user = await self.user_service.create_user(
                email=email,
                password=None,
                first_name=profile.first_name,
                last_name=profile.last_name,
                avatar_url=profile.avatar_url,
            )
        except UserAlreadyExistsError:
            # Concurrent first login for the same email
            user = await self.user_service.get_by_email(email)
            if user is None:
                raise
            return user, False

        events.publish(
            events.UserCreated(
                user_id=user.id,
                email=user.email,
                username=user.username,
                first_name=user.first_name,
                last_name=user.last_name,
                source=profile.provider,
            )
        )
        return user, True
