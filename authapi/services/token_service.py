"""Refresh token record persistence."""

import hmac
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import structlog

from authapi.database import command_acknowledged, get_pool
from authapi.models.user import TokenRecord
from authapi.services.auth_service import hash_refresh_token

logger = structlog.get_logger(__name__)


class TokenService:
    """Service for the per-user token record (hashed refresh token + lock flag)."""

    async def find_by_user_id(self, user_id: UUID) -> Optional[TokenRecord]:
        """Get the token record for a user.

        Args:
            user_id: Owner of the record

        Returns:
            TokenRecord or None if the user never logged in
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT id, user_id, refresh_token_hash, locked, created_at, updated_at
                FROM tokens
                WHERE user_id = $1
                """,
                user_id,
            )

        if row is None:
            return None

        return TokenRecord(
            id=row["id"],
            user_id=row["user_id"],
            refresh_token_hash=row["refresh_token_hash"],
            locked=row["locked"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def store_refresh_token(self, user_id: UUID, raw_token: str) -> bool:
        """Hash a refresh token and upsert it as the user's current one.

        The previous hash is overwritten, so the previously issued refresh
        token no longer validates.

        Args:
            user_id: Owner of the token
            raw_token: Refresh token returned to the client

        Returns:
            True if the store acknowledged the write
        """
        token_hash = hash_refresh_token(raw_token)
        now = datetime.now(timezone.utc)

        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute(
                """
                INSERT INTO tokens (id, user_id, refresh_token_hash, locked, created_at, updated_at)
                VALUES ($1, $2, $3, FALSE, $4, $4)
                ON CONFLICT (user_id)
                DO UPDATE SET refresh_token_hash = EXCLUDED.refresh_token_hash,
                              updated_at = EXCLUDED.updated_at
                """,
                uuid4(),
                user_id,
                token_hash,
                now,
            )

        stored = command_acknowledged(result)

        if stored:
            logger.info("refresh_token_stored", user_id=str(user_id))
        else:
            logger.warning("refresh_token_store_not_acknowledged", user_id=str(user_id), result=result)

        return stored

    async def invalidate_refresh_token(self, user_id: UUID) -> bool:
        """Clear the stored refresh token hash for a user.

        Args:
            user_id: Owner of the token record

        Returns:
            True if a token record was updated, False if none exists
        """
        now = datetime.now(timezone.utc)

        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute(
                """
                UPDATE tokens
                SET refresh_token_hash = NULL, updated_at = $1
                WHERE user_id = $2
                """,
                now,
                user_id,
            )

        cleared = command_acknowledged(result)

        if cleared:
            logger.info("refresh_token_invalidated", user_id=str(user_id))
        else:
            logger.warning("refresh_token_invalidate_not_found", user_id=str(user_id))

        return cleared

    async def verify_refresh_token(self, user_id: UUID, raw_token: str) -> bool:
        """Check a presented refresh token against the stored hash.

        Args:
            user_id: Subject of the presented token
            raw_token: Refresh token as presented by the client

        Returns:
            True only if a hash is stored, the record is unlocked, and the
            hash matches the presented token
        """
        record = await self.find_by_user_id(user_id)

        if record is None or record.refresh_token_hash is None:
            logger.warning("refresh_token_not_found", user_id=str(user_id))
            return False

        if record.locked:
            logger.warning("refresh_token_locked", user_id=str(user_id))
            return False

        matches = hmac.compare_digest(
            hash_refresh_token(raw_token),
            record.refresh_token_hash,
        )
        if not matches:
            logger.warning("refresh_token_mismatch", user_id=str(user_id))
        return matches
