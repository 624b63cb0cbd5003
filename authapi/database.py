"""asyncpg pool lifecycle and schema migrations."""

from pathlib import Path
from typing import Optional

import asyncpg
import structlog

from authapi.config import get_settings

logger = structlog.get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent.parent / "migrations"

_pool: Optional[asyncpg.Pool] = None


async def get_pool() -> asyncpg.Pool:
    """Return the pool created by init_database().

    Raises:
        RuntimeError: If the pool has not been created yet
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_database() first.")
    return _pool


async def init_database() -> asyncpg.Pool:
    """Create the shared pool from DATABASE_URL (idempotent)."""
    global _pool

    if _pool is not None:
        return _pool

    settings = get_settings()

    try:
        _pool = await asyncpg.create_pool(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout_seconds,
        )
    except (OSError, asyncpg.PostgresError) as e:
        logger.error("database_pool_creation_failed", error=str(e))
        raise

    logger.info(
        "database_pool_created",
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    return _pool


async def close_database() -> None:
    global _pool

    if _pool is None:
        return

    await _pool.close()
    _pool = None
    logger.info("database_pool_closed")


async def run_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
    """Apply pending ``*.sql`` files in filename order.

    Applied filenames are recorded in ``schema_migrations``; each file runs in
    its own transaction together with its bookkeeping row, so a failing file
    leaves nothing behind and is retried on the next start.

    Returns:
        Filenames applied by this call
    """
    if not migrations_dir.is_dir():
        logger.warning("migrations_directory_not_found", path=str(migrations_dir))
        return []

    pool = await get_pool()
    applied_now: list[str] = []

    async with pool.acquire() as conn:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                filename TEXT PRIMARY KEY,
                applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
            """
        )
        already_applied = {
            row["filename"] for row in await conn.fetch("SELECT filename FROM schema_migrations")
        }

        for path in sorted(migrations_dir.glob("*.sql")):
            if path.name in already_applied:
                continue

            try:
                async with conn.transaction():
                    await conn.execute(path.read_text())
                    await conn.execute(
                        "INSERT INTO schema_migrations (filename) VALUES ($1)",
                        path.name,
                    )
            except asyncpg.PostgresError as e:
                logger.error("migration_failed", file=path.name, error=str(e))
                raise

            applied_now.append(path.name)
            logger.info("migration_applied", file=path.name)

    if not applied_now:
        logger.info("migrations_up_to_date")
    return applied_now


async def health_check() -> bool:
    """True when ``SELECT 1`` succeeds on a pooled connection."""
    try:
        pool = await get_pool()
        async with pool.acquire() as conn:
            return await conn.fetchval("SELECT 1") == 1
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return False


def command_acknowledged(status: Optional[str]) -> bool:
    """Return True when an asyncpg command status reports affected rows.

    asyncpg returns tags such as ``"INSERT 0 1"`` or ``"UPDATE 0"``; the last
    field is the row count.
    """
    if not status:
        return False
    try:
        return int(status.rsplit(" ", 1)[-1]) > 0
    except ValueError:
        return False
