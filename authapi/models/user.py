"""User and token record models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class Role(str, Enum):
    """Roles checked by the role guard."""

    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """A registered account. The password hash is never part of this model."""

    id: UUID
    email: str
    username: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    avatar_url: Optional[str] = None
    role: Role = Role.USER
    created_at: datetime
    updated_at: datetime


class TokenRecord(BaseModel):
    """The single per-user row holding the current refresh token hash."""

    id: UUID
    user_id: UUID
    refresh_token_hash: Optional[str] = None
    locked: bool = False
    created_at: datetime
    updated_at: datetime
