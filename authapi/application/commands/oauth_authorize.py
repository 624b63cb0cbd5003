"""OAuth authorize command: create a one-time state and build the consent URL."""

import secrets
from dataclasses import dataclass
from typing import Optional

import structlog

from authapi.exceptions import ServiceUnavailableError
from authapi.services.oauth_service import GoogleOAuthService
from authapi.services.redis_service import RedisService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OAuthAuthorizeCommand:
    provider: str = "google"


class OAuthAuthorizeHandler:
    def __init__(
        self,
        oauth_service: Optional[GoogleOAuthService] = None,
        redis_service: Optional[RedisService] = None,
    ) -> None:
        self.oauth_service = oauth_service or GoogleOAuthService()
        self.redis_service = redis_service or RedisService()

    async def execute(self, command: OAuthAuthorizeCommand) -> str:
        """Return the provider URL the browser should be redirected to.

        Raises:
            ServiceUnavailableError: Provider not configured or state store unavailable
        """
        if not self.oauth_service.enabled:
            raise ServiceUnavailableError("Google OAuth is not configured")

        state = secrets.token_urlsafe(32)

        if not await self.redis_service.store_oauth_state(state, command.provider):
            raise ServiceUnavailableError("OAuth state store unavailable")

        logger.info("oauth_authorize_started", provider=command.provider)
        return self.oauth_service.build_authorization_url(state)
