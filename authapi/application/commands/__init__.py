"""Command handlers."""

from authapi.application.commands.create_user import CreateUserCommand, CreateUserHandler
from authapi.application.commands.login import LoginCommand, LoginHandler
from authapi.application.commands.logout import LogoutCommand, LogoutHandler
from authapi.application.commands.oauth_authorize import (
    OAuthAuthorizeCommand,
    OAuthAuthorizeHandler,
)
from authapi.application.commands.oauth_callback import (
    OAuthCallbackCommand,
    OAuthCallbackHandler,
    OAuthCallbackResult,
)
from authapi.application.commands.refresh import RefreshCommand, RefreshHandler
from authapi.application.commands.register import RegisterCommand, RegisterHandler

__all__ = [
    "CreateUserCommand",
    "CreateUserHandler",
    "LoginCommand",
    "LoginHandler",
    "LogoutCommand",
    "LogoutHandler",
    "OAuthAuthorizeCommand",
    "OAuthAuthorizeHandler",
    "OAuthCallbackCommand",
    "OAuthCallbackHandler",
    "OAuthCallbackResult",
    "RefreshCommand",
    "RefreshHandler",
    "RegisterCommand",
    "RegisterHandler",
]
