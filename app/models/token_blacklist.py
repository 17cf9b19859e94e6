"""Revoked tokens and per-user revocations."""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class TokenBlacklist(Base):
    """A single revoked JWT, stored as the SHA-256 hex digest of the token.

    Rows are removed by the cleanup loop once ``expires_at`` has passed,
    since the token would be rejected as expired by then anyway.
    """

    __tablename__ = "token_blacklist"

    token_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )


class UserTokenRevocation(Base):
    """Marks every token issued to a user as revoked."""

    __tablename__ = "user_token_revocations"

    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    revoked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
