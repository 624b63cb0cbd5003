"""FastAPI application: lifespan, middleware, and routers."""

from contextlib import asynccontextmanager

from dotenv import load_dotenv

# .env must be loaded before Settings is first built
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from authapi import __version__
from authapi.api.auth import router as auth_router
from authapi.api.errors import register_exception_handlers
from authapi.api.middleware import CorrelationIdMiddleware
from authapi.api.routes import router as health_router
from authapi.api.users import router as users_router
from authapi.config import get_settings
from authapi.services.logging_service import configure_logging, get_logger


async def _connect_database(logger) -> None:
    from authapi.database import init_database, run_migrations

    try:
        await init_database()
        applied = await run_migrations()
    except Exception as e:
        logger.warning(
            "database_unavailable_at_startup",
            error=str(e),
            note="auth and user endpoints will fail until the database is reachable",
        )
        return
    logger.info("database_ready", migrations_applied=applied)


async def _connect_redis(logger) -> None:
    from authapi.services.redis_service import get_redis

    if await get_redis() is None:
        logger.warning(
            "redis_unavailable_at_startup",
            note="Google login returns 503 until Redis is reachable",
        )
    else:
        logger.info("redis_ready")


async def _disconnect(logger) -> None:
    from authapi.database import close_database
    from authapi.services.redis_service import close_redis

    for name, close in (("database", close_database), ("redis", close_redis)):
        try:
            await close()
        except Exception as e:
            logger.warning("shutdown_close_failed", dependency=name, error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.app_env != "development")
    logger = get_logger("main")

    await _connect_database(logger)
    await _connect_redis(logger)

    logger.info(
        "application_started",
        app_env=settings.app_env,
        google_oauth_enabled=settings.google_oauth_enabled,
    )

    yield

    await _disconnect(logger)
    logger.info("application_shutdown")


app = FastAPI(
    title="Auth API",
    description="Registration, login, token refresh, Google OAuth, and user profile endpoints",
    version=__version__,
    lifespan=lifespan,
)

register_exception_handlers(app)

# The SPA receives tokens on OAUTH_SUCCESS_REDIRECT_URL and calls back from that origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_settings().oauth_success_redirect_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(health_router)
