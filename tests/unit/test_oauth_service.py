"""Unit tests for the Google OAuth client using httpx.MockTransport."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from authapi.exceptions import OAuthProviderError
from authapi.services.oauth_service import (
    GOOGLE_AUTH_URL,
    GOOGLE_TOKEN_URL,
    GOOGLE_USERINFO_URL,
    GoogleOAuthService,
)


def _google(handler) -> GoogleOAuthService:
    return GoogleOAuthService(transport=httpx.MockTransport(handler))


class TestAuthorizationUrl:
    def test_contains_client_and_state(self):
        url = GoogleOAuthService().build_authorization_url("state-123")

        assert url.startswith(GOOGLE_AUTH_URL)
        params = parse_qs(urlparse(url).query)
        assert params["client_id"] == ["test-google-client-id"]
        assert params["redirect_uri"] == ["http://testserver/auth/oauth/google/callback"]
        assert params["response_type"] == ["code"]
        assert params["state"] == ["state-123"]
        assert "email" in params["scope"][0].split()

    def test_enabled_with_credentials(self):
        assert GoogleOAuthService().enabled is True


class TestFetchProfile:
    async def test_exchanges_code_and_maps_profile(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if str(request.url) == GOOGLE_TOKEN_URL:
                body = parse_qs(request.content.decode())
                assert body["code"] == ["auth-code"]
                assert body["grant_type"] == ["authorization_code"]
                return httpx.Response(200, json={"access_token": "google-at"})
            if str(request.url) == GOOGLE_USERINFO_URL:
                assert request.headers["Authorization"] == "Bearer google-at"
                return httpx.Response(
                    200,
                    json={
                        "sub": "10987",
                        "email": "alice@example.com",
                        "given_name": "Alice",
                        "family_name": "Smith",
                        "picture": "https://img.example/alice.png",
                    },
                )
            return httpx.Response(404)

        profile = await _google(handler).fetch_profile("auth-code")

        assert len(seen) == 2
        assert profile.provider == "google"
        assert profile.provider_user_id == "10987"
        assert profile.email == "alice@example.com"
        assert profile.first_name == "Alice"
        assert profile.last_name == "Smith"
        assert profile.avatar_url == "https://img.example/alice.png"

    async def test_missing_names_default_to_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == GOOGLE_TOKEN_URL:
                return httpx.Response(200, json={"access_token": "google-at"})
            return httpx.Response(200, json={"sub": "1", "email": "a@example.com"})

        profile = await _google(handler).fetch_profile("auth-code")

        assert profile.first_name == ""
        assert profile.last_name == ""
        assert profile.avatar_url is None

    async def test_rejected_code(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_grant"})

        with pytest.raises(OAuthProviderError) as exc_info:
            await _google(handler).fetch_profile("bad-code")

        assert exc_info.value.status_code == 502
        assert exc_info.value.provider == "google"

    async def test_token_response_without_access_token(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"token_type": "Bearer"})

        with pytest.raises(OAuthProviderError, match="Missing access token"):
            await _google(handler).fetch_profile("auth-code")

    async def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(OAuthProviderError, match="connection refused"):
            await _google(handler).fetch_profile("auth-code")
