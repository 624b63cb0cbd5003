"""Redis client and one-time OAuth state storage."""

from typing import Optional

import redis.asyncio as redis
import structlog

from authapi.config import get_settings

logger = structlog.get_logger(__name__)

# Global Redis client
_redis_client: Optional[redis.Redis] = None

OAUTH_STATE_PREFIX = "oauth_state:"


async def get_redis() -> Optional[redis.Redis]:
    """Get or create the Redis client.

    Returns:
        Redis client or None if connection fails (graceful degradation)
    """
    global _redis_client

    if _redis_client is not None:
        return _redis_client

    settings = get_settings()

    try:
        _redis_client = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        await _redis_client.ping()
        logger.info("redis_connected", url=settings.redis_url.split("@")[-1])
        return _redis_client
    except Exception as e:
        logger.warning("redis_connection_failed", error=str(e))
        _redis_client = None
        return None


async def close_redis() -> None:
    """Close the Redis connection."""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
        logger.info("redis_connection_closed")


class RedisService:
    """Service for short-lived OAuth state values."""

    def __init__(self):
        self.settings = get_settings()

    async def store_oauth_state(self, state: str, provider: str) -> bool:
        """Remember a state value until the provider calls back.

        Args:
            state: Random value sent to the provider
            provider: Provider name the state was issued for

        Returns:
            True if stored, False if Redis is unavailable or the write failed
        """
        client = await get_redis()
        if client is None:
            return False

        try:
            await client.set(
                f"{OAUTH_STATE_PREFIX}{state}",
                provider,
                ex=self.settings.oauth_state_ttl_seconds,
            )
            return True
        except Exception as e:
            logger.warning("redis_store_oauth_state_failed", error=str(e))
            return False

    async def consume_oauth_state(self, state: str) -> Optional[str]:
        """Read and delete a state value so it cannot be replayed.

        Args:
            state: State value returned by the provider

        Returns:
            Provider name the state was issued for, or None if unknown,
            expired, already used, or Redis is unavailable
        """
        client = await get_redis()
        if client is None:
            return None

        try:
            return await client.getdel(f"{OAUTH_STATE_PREFIX}{state}")
        except Exception as e:
            logger.warning("redis_consume_oauth_state_failed", error=str(e))
            return None
