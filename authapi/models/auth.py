"""Auth and user request/response models with validation."""

import re
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from authapi.models.user import Role, User

# bcrypt only uses the first 72 bytes of its input
BCRYPT_MAX_PASSWORD_BYTES = 72
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


def _validate_username(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not USERNAME_PATTERN.match(v):
        raise ValueError(
            "Username must contain only alphanumeric characters, "
            "underscores, or hyphens"
        )
    return v


def _validate_password(v: str) -> str:
    if not v.strip():
        raise ValueError("Password cannot be empty or whitespace only")
    if len(v.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValueError(f"Password cannot be longer than {BCRYPT_MAX_PASSWORD_BYTES} bytes")
    return v


class LoginRequest(BaseModel):
    """Login credentials.

    Attributes:
        identifier: Email address or username
        password: Plain-text password
    """

    identifier: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1)

    @field_validator("identifier")
    @classmethod
    def identifier_stripped(cls, v: str) -> str:
        """Strip surrounding whitespace and reject blank identifiers."""
        v = v.strip()
        if not v:
            raise ValueError("Identifier cannot be empty")
        return v


class RegisterRequest(BaseModel):
    """Self-service registration request.

    Attributes:
        email: Unique email address
        password: Password (8-50 chars, at most 72 bytes as UTF-8)
        username: Optional unique username (3-100 chars, alphanumeric + underscore/hyphen)
        first_name: Given name
        last_name: Family name
    """

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=50)
    username: Optional[str] = Field(default=None, min_length=3, max_length=100)
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)

    @field_validator("email", mode="before")
    @classmethod
    def email_normalized(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("username")
    @classmethod
    def username_valid_chars(cls, v: Optional[str]) -> Optional[str]:
        return _validate_username(v)

    @field_validator("password")
    @classmethod
    def password_valid(cls, v: str) -> str:
        return _validate_password(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def names_stripped(cls, v: str) -> str:
        return v.strip()


class CreateUserRequest(RegisterRequest):
    """Admin request to create a user with an explicit role."""

    role: Role = Role.USER


class TokenPair(BaseModel):
    """Access and refresh tokens issued together.

    Attributes:
        access_token: Short-lived JWT for API access
        refresh_token: Longer-lived JWT exchanged at /auth/refresh
        token_type: Always "bearer"
        expires_in: Access token lifetime in seconds
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(ge=1, description="Access token lifetime in seconds")


class UserSummary(BaseModel):
    """Compact user representation for API responses."""

    id: UUID
    email: str
    username: Optional[str] = None
    first_name: str
    last_name: str
    role: Role
    created_at: datetime

    @classmethod
    def from_user(cls, user: User):
        """Build the response from a User, dropping fields the model does not declare."""
        return cls(**user.model_dump())


class ProfileResponse(UserSummary):
    """Full profile of the current user."""

    avatar_url: Optional[str] = None
    updated_at: datetime


class MeResponse(BaseModel):
    """Identity fields returned by GET /users/me."""

    email: str
    username: Optional[str] = None
    first_name: str
    last_name: str


class OAuthProfile(BaseModel):
    """Profile fields read from an OAuth provider."""

    provider: str
    provider_user_id: str
    email: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    avatar_url: Optional[str] = None
