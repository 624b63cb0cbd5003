"""Authentication API endpoints."""

from typing import Optional
from urllib.parse import urlencode
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from authapi.api.dependencies import get_current_user, get_refresh_user_id
from authapi.application.commands import (
    LoginCommand,
    LoginHandler,
    LogoutCommand,
    LogoutHandler,
    OAuthAuthorizeCommand,
    OAuthAuthorizeHandler,
    OAuthCallbackCommand,
    OAuthCallbackHandler,
    RefreshCommand,
    RefreshHandler,
    RegisterCommand,
    RegisterHandler,
)
from authapi.config import get_settings
from authapi.exceptions import AppError
from authapi.models.auth import LoginRequest, RegisterRequest, TokenPair, UserSummary
from authapi.models.user import User

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest) -> UserSummary:
    """Create an account with email and password.

    Raises:
        400: If the email or username is already taken
    """
    user = await RegisterHandler().execute(
        RegisterCommand(
            email=request.email,
            password=request.password,
            username=request.username,
            first_name=request.first_name,
            last_name=request.last_name,
        )
    )
    return UserSummary.from_user(user)


@router.post("/login")
async def login(request: LoginRequest) -> TokenPair:
    """Login with email or username and password.

    Raises:
        401: If credentials are invalid
        400: If the refresh token could not be stored
    """
    return await LoginHandler().execute(
        LoginCommand(identifier=request.identifier, password=request.password)
    )


@router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)) -> dict:
    """Invalidate the current user's refresh token."""
    await LogoutHandler().execute(LogoutCommand(user_id=current_user.id))
    return {"logged_out": True}


@router.post("/refresh")
async def refresh(user_id: UUID = Depends(get_refresh_user_id)) -> TokenPair:
    """Exchange the Bearer refresh token for a new token pair.

    The returned refresh token replaces the presented one.
    """
    return await RefreshHandler().execute(RefreshCommand(user_id=user_id))


@router.get("/oauth/google/login")
async def google_login() -> RedirectResponse:
    """Redirect the browser to Google's consent screen."""
    url = await OAuthAuthorizeHandler().execute(OAuthAuthorizeCommand(provider="google"))
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get("/oauth/google/callback")
async def google_callback(
    state: str,
    code: Optional[str] = None,
    error: Optional[str] = None,
) -> RedirectResponse:
    """Finish Google login and hand the tokens to the frontend."""
    if error or not code:
        logger.warning("oauth_callback_without_code", provider="google", error=error)
        raise AppError(f"OAuth login was not completed: {error or 'missing code'}")

    result = await OAuthCallbackHandler().execute(
        OAuthCallbackCommand(code=code, state=state, provider="google")
    )

    query = urlencode(
        {
            "token": result.tokens.access_token,
            "refresh_token": result.tokens.refresh_token,
        }
    )
    redirect_url = f"{get_settings().oauth_success_redirect_url}?{query}"
    return RedirectResponse(redirect_url, status_code=status.HTTP_302_FOUND)
