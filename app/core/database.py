"""Async SQLAlchemy engine and session factory."""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from app.core.config import Settings, settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(app_settings: Settings) -> AsyncEngine:
    """Create the asyncpg engine described by ``app_settings``."""
    return create_async_engine(
        app_settings.database_url,
        pool_size=app_settings.db_pool_size,
        max_overflow=app_settings.db_max_overflow,
        pool_timeout=app_settings.db_pool_timeout,
        pool_recycle=app_settings.db_pool_recycle,
        pool_pre_ping=True,
        echo=app_settings.debug and app_settings.log_level == "DEBUG",
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Rows returned by upserts are read after commit.
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings)
async_session_maker = build_session_factory(engine)


async def check_db_connection(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> bool:
    """Return True when ``SELECT 1`` succeeds through the given session factory."""
    factory = session_factory or async_session_maker
    try:
        async with factory() as session:
            await session.execute(text("SELECT 1"))
    except (OSError, ConnectionError) as e:
        logger.debug(f"Database unreachable: {e}")
        return False
    except Exception as e:
        logger.warning(f"Database check failed: {e}")
        return False
    return True
