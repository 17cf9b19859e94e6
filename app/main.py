"""teamsync Backend - FastAPI Application Factory."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api import api_router
from app.api.auth import router as auth_router
from app.api.health import router as health_router
from app.core import ResponseTerminated, Settings, async_session_maker, get_settings, setup_logging
from app.core.logging import get_logger
from app.middleware import AuthenticationMiddleware
from app.services.auth import AuthConfig, TokenAuthenticator
from app.services.pipeline import Pipeline
from app.services.token_blacklist import TokenBlacklistService

logger = get_logger("main")


def task_done_callback(task: asyncio.Task[None]) -> None:
    """Log unhandled exceptions from background tasks."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Background task {task.get_name()} failed: {exc}")


async def _token_blacklist_cleanup_loop(blacklist: TokenBlacklistService, interval: int) -> None:
    """Periodically remove expired entries from the token blacklist."""
    while True:
        await asyncio.sleep(interval)
        try:
            removed = await blacklist.cleanup_expired()
            if removed > 0:
                logger.info(f"Cleaned up {removed} expired token blacklist entries")
        except Exception:
            logger.exception("Error cleaning up token blacklist")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    app_settings: Settings = app.state.settings
    setup_logging(
        level=app_settings.log_level,
        format_type="dev" if app_settings.debug else "structured",
    )
    logger.info(f"Starting {app_settings.app_name} v{app_settings.app_version}")

    cleanup_task = asyncio.create_task(
        _token_blacklist_cleanup_loop(
            app.state.token_blacklist,
            app_settings.blacklist_cleanup_interval_seconds,
        ),
        name="token_blacklist_cleanup",
    )
    cleanup_task.add_done_callback(task_done_callback)

    yield

    logger.info("Shutting down...")
    cleanup_task.cancel()
    try:
        await cleanup_task
    except asyncio.CancelledError:
        pass


async def _response_terminated_handler(request: Request, exc: ResponseTerminated) -> JSONResponse:
    return exc.response.to_json_response()


def create_app(
    app_settings: Settings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    token_blacklist: TokenBlacklistService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Collaborators default to the process-wide settings and session factory;
    tests pass their own.
    """
    app_settings = app_settings or get_settings()
    session_factory = session_factory or async_session_maker
    token_blacklist = token_blacklist or TokenBlacklistService(session_factory)
    auth_config = AuthConfig.from_settings(app_settings)

    app = FastAPI(
        title=app_settings.app_name,
        description="Team role synchronisation backend with JWT authentication",
        version=app_settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        openapi_url="/openapi.json" if app_settings.debug else None,
    )
    app.state.settings = app_settings
    app.state.session_factory = session_factory
    app.state.token_blacklist = token_blacklist
    app.state.auth_config = auth_config

    # All /api/* requests require a valid, unrevoked bearer token
    app.add_middleware(
        AuthenticationMiddleware,
        pipeline=Pipeline([TokenAuthenticator(auth_config, token_blacklist)]),
    )
    app.add_exception_handler(ResponseTerminated, _response_terminated_handler)

    app.include_router(health_router)  # Health at root level
    app.include_router(auth_router)  # Auth at root level (/auth)
    app.include_router(api_router)  # API at /api

    return app


# Application instance
app = create_app()
