"""Liveness and dependency health."""

from datetime import datetime, timezone

from fastapi import APIRouter

from authapi import __version__
from authapi.config import get_settings

router = APIRouter(tags=["Health"])


async def _database_status() -> str:
    from authapi.database import health_check

    try:
        return "healthy" if await health_check() else "unhealthy"
    except Exception:
        return "unavailable"


async def _redis_status() -> str:
    from authapi.services.redis_service import get_redis

    try:
        return "healthy" if await get_redis() is not None else "unavailable"
    except Exception:
        return "unavailable"


@router.get("/health")
async def health_check() -> dict:
    """Report process liveness and the state of each backing service.

    Always answers 200. ``status`` is ``degraded`` when the database is not
    healthy, since no auth or user endpoint can work without it; Redis only
    affects OAuth login and is reported without changing ``status``.
    """
    database = await _database_status()

    return {
        "status": "healthy" if database == "healthy" else "degraded",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": database,
        "redis": await _redis_status(),
        "google_oauth": "configured" if get_settings().google_oauth_enabled else "disabled",
    }
