"""Token blacklist - revocation lookups used by authentication."""

import hashlib
import logging
from datetime import UTC, datetime
from typing import Any, Protocol

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.token_blacklist import TokenBlacklist, UserTokenRevocation

logger = logging.getLogger(__name__)


class TokenBlacklistStore(Protocol):
    """Lookups the authenticator needs; any backing store will do."""

    async def is_token_blacklisted(self, token: str) -> bool: ...

    async def is_all_tokens_blacklisted(self, user_id: Any) -> bool: ...


def hash_token(token: str) -> str:
    """Digest under which a token is stored in the blacklist."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class TokenBlacklistService:
    """Database-backed blacklist.

    Every call opens its own session so lookups can run concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def is_token_blacklisted(self, token: str) -> bool:
        """Check whether this exact token has been revoked."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(TokenBlacklist.token_hash).where(
                    TokenBlacklist.token_hash == hash_token(token)
                )
            )
            return result.scalar_one_or_none() is not None

    async def is_all_tokens_blacklisted(self, user_id: Any) -> bool:
        """Check whether every token of ``user_id`` has been revoked."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(UserTokenRevocation.user_id).where(
                    UserTokenRevocation.user_id == str(user_id)
                )
            )
            return result.scalar_one_or_none() is not None

    async def blacklist_token(self, token: str, expires_at: datetime) -> None:
        """Revoke a token until it would have expired anyway."""
        stmt = (
            insert(TokenBlacklist)
            .values(token_hash=hash_token(token), expires_at=expires_at)
            .on_conflict_do_nothing(index_elements=[TokenBlacklist.token_hash])
        )
        async with self.session_factory() as session:
            await session.execute(stmt)
            await session.commit()

    async def blacklist_all_tokens(self, user_id: Any) -> None:
        """Revoke every token of a user, past and future."""
        now = datetime.now(UTC)
        stmt = (
            insert(UserTokenRevocation)
            .values(user_id=str(user_id), revoked_at=now)
            .on_conflict_do_update(
                index_elements=[UserTokenRevocation.user_id],
                set_={"revoked_at": now},
            )
        )
        async with self.session_factory() as session:
            await session.execute(stmt)
            await session.commit()
        logger.info(f"All tokens revoked for user {user_id}")

    async def cleanup_expired(self) -> int:
        """Remove expired token entries. Returns count removed."""
        async with self.session_factory() as session:
            result: CursorResult[Any] = await session.execute(  # type: ignore[assignment]
                delete(TokenBlacklist).where(TokenBlacklist.expires_at < datetime.now(UTC))
            )
            await session.commit()
            return result.rowcount
