"""Google OAuth 2.0 authorization-code client."""

from typing import Optional
from urllib.parse import urlencode

import httpx
import structlog

from authapi.config import get_settings
from authapi.exceptions import OAuthProviderError
from authapi.models.auth import OAuthProfile

logger = structlog.get_logger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
GOOGLE_SCOPES = ("openid", "email", "profile")
PROVIDER_TIMEOUT_SECONDS = 10.0


class GoogleOAuthService:
    """Builds the consent URL and turns a callback code into a profile."""

    name = "google"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = get_settings()
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self.settings.google_oauth_enabled

    def build_authorization_url(self, state: str) -> str:
        """Return the Google consent URL for a state value."""
        params = {
            "client_id": self.settings.google_client_id,
            "redirect_uri": self.settings.google_callback_url,
            "response_type": "code",
            "scope": " ".join(GOOGLE_SCOPES),
            "state": state,
            "access_type": "online",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def fetch_profile(self, code: str) -> OAuthProfile:
        """Exchange an authorization code and read the user's profile.

        Args:
            code: Authorization code from the callback query string

        Returns:
            OAuthProfile with email, names, and avatar

        Raises:
            OAuthProviderError: If the exchange or profile request fails
        """
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=PROVIDER_TIMEOUT_SECONDS,
            ) as client:
                tokens = await self._exchange_code(client, code)
                return await self._fetch_userinfo(client, tokens)
        except httpx.HTTPError as e:
            logger.warning("oauth_provider_request_failed", provider=self.name, error=str(e))
            raise OAuthProviderError(self.name, str(e)) from e

    async def _exchange_code(self, client: httpx.AsyncClient, code: str) -> dict:
        data = {
            "grant_type": "authorization_code",
            "client_id": self.settings.google_client_id,
            "client_secret": self.settings.google_client_secret,
            "redirect_uri": self.settings.google_callback_url,
            "code": code,
        }
        response = await client.post(GOOGLE_TOKEN_URL, data=data)
        response.raise_for_status()
        return response.json()

    async def _fetch_userinfo(self, client: httpx.AsyncClient, tokens: dict) -> OAuthProfile:
        access_token = tokens.get("access_token")
        if not access_token:
            raise OAuthProviderError(self.name, "Missing access token in token response")

        response = await client.get(
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        response.raise_for_status()
        payload = response.json()

        return OAuthProfile(
            provider=self.name,
            provider_user_id=str(payload.get("sub", "")),
            email=payload.get("email"),
            first_name=payload.get("given_name") or "",
            last_name=payload.get("family_name") or "",
            avatar_url=payload.get("picture"),
        )
