"""User management service."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import asyncpg
import structlog

from authapi.database import get_pool
from authapi.exceptions import UserAlreadyExistsError
from authapi.models.user import Role, User
from authapi.services.auth_service import AuthService

logger = structlog.get_logger(__name__)

USER_COLUMNS = "id, email, username, first_name, last_name, avatar_url, role, created_at, updated_at"


def _row_to_user(row) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        username=row["username"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        avatar_url=row["avatar_url"],
        role=Role(row["role"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class UserService:
    """Service for user persistence."""

    def __init__(self):
        self.auth_service = AuthService()

    async def create_user(
        self,
        email: str,
        password: Optional[str],
        username: Optional[str] = None,
        first_name: str = "",
        last_name: str = "",
        role: Role = Role.USER,
        avatar_url: Optional[str] = None,
    ) -> User:
        """Create a new user, hashing the password when one is given.

        Args:
            email: Unique email address
            password: Plain-text password, or None for OAuth-only accounts
            username: Optional unique username
            first_name: Given name
            last_name: Family name
            role: Role checked by the role guard
            avatar_url: Optional profile picture URL

        Returns:
            Created User model

        Raises:
            UserAlreadyExistsError: If the email or username is already taken
        """
        user_id = uuid4()
        now = datetime.now(timezone.utc)
        password_hash = self.auth_service.hash_password(password) if password is not None else None

        pool = await get_pool()

        try:
            async with pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO users (id, email, username, password_hash, first_name, last_name,
                                       avatar_url, role, created_at, updated_at)
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                    """,
                    user_id,
                    email,
                    username,
                    password_hash,
                    first_name,
                    last_name,
                    avatar_url,
                    Role(role).value,
                    now,
                    now,
                )
        except asyncpg.UniqueViolationError:
            logger.warning("user_create_conflict", email=email, username=username)
            raise UserAlreadyExistsError()

        logger.info(
            "user_created",
            user_id=str(user_id),
            email=email,
            username=username,
            role=Role(role).value,
        )

        return User(
            id=user_id,
            email=email,
            username=username,
            first_name=first_name,
            last_name=last_name,
            avatar_url=avatar_url,
            role=role,
            created_at=now,
            updated_at=now,
        )

    async def get_by_identifier(self, identifier: str) -> Optional[tuple[User, Optional[str]]]:
        """Get a user by email or username (case-insensitive).

        Args:
            identifier: Email address or username

        Returns:
            Tuple of (User, password_hash) or None if not found. The hash is
            None for accounts created through OAuth.
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                SELECT {USER_COLUMNS}, password_hash
                FROM users
                WHERE LOWER(email) = LOWER($1) OR LOWER(username) = LOWER($1)
                LIMIT 1
                """,
                identifier,
            )

        if row is None:
            return None

        return _row_to_user(row), row["password_hash"]

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (case-insensitive)."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {USER_COLUMNS} FROM users WHERE LOWER(email) = LOWER($1)",
                email,
            )

        return _row_to_user(row) if row is not None else None

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by username (case-insensitive)."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {USER_COLUMNS} FROM users WHERE LOWER(username) = LOWER($1)",
                username,
            )

        return _row_to_user(row) if row is not None else None

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by UUID.

        Args:
            user_id: User UUID

        Returns:
            User model or None if not found
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = $1",
                user_id,
            )

        if row is None:
            return None

        return _row_to_user(row)
