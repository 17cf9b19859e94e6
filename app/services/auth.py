"""JWT authentication: access-token verification, role gating and refresh."""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt.exceptions import PyJWTError

from app.core.config import Settings
from app.core.responses import ApiResponse
from app.services.pipeline import (
    Continue,
    IdentityClaim,
    RequestContext,
    StepResult,
    Terminate,
)
from app.services.token_blacklist import TokenBlacklistStore

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base authentication error; carries the client-facing message and status."""

    status_code = 401
    message = "Authentication failed."

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_response(self) -> ApiResponse:
        return ApiResponse.error(self.message, self.status_code)


class MissingTokenError(AuthError):
    message = "Authentication failed. No token provided."


class InvalidTokenError(AuthError):
    message = "Authentication failed. Invalid token."


class TokenExpiredError(AuthError):
    message = "Access token expired. Please refresh your token."


class BlacklistedTokenError(AuthError):
    message = "Authentication failed. Token is blacklisted."


class ForbiddenError(AuthError):
    status_code = 403
    message = "Access denied. Insufficient permissions."


class MissingRefreshTokenError(AuthError):
    status_code = 400
    message = "No refresh token provided."


class InvalidRefreshTokenError(AuthError):
    message = "Invalid or expired refresh token."


@dataclass(frozen=True)
class AuthConfig:
    """Signing configuration handed to the auth components at construction."""

    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_token_lifetime: timedelta = timedelta(minutes=15)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthConfig":
        return cls(
            access_secret=settings.jwt_access_secret,
            refresh_secret=settings.jwt_refresh_secret,
            algorithm=settings.jwt_algorithm,
            access_token_lifetime=timedelta(minutes=settings.jwt_access_token_expire_minutes),
        )


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def create_access_token(
    config: AuthConfig,
    user_id: Any,
    email: str | None,
    role: str | None,
    now: datetime | None = None,
) -> str:
    """Sign a short-lived access token for the given identity."""
    issued_at = now or datetime.now(UTC)
    payload = {
        "id": user_id,
        "email": email,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + config.access_token_lifetime,
    }
    return str(jwt.encode(payload, config.access_secret, algorithm=config.algorithm))


def decode_access_token(config: AuthConfig, token: str) -> dict[str, Any]:
    """Verify an access token's signature and expiry."""
    try:
        return jwt.decode(token, config.access_secret, algorithms=[config.algorithm])
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError() from e
    except PyJWTError as e:
        raise InvalidTokenError() from e


def decode_refresh_token(config: AuthConfig, token: str) -> dict[str, Any]:
    """Verify a refresh token; expiry and bad signatures are not distinguished."""
    try:
        return jwt.decode(token, config.refresh_secret, algorithms=[config.algorithm])
    except PyJWTError as e:
        raise InvalidRefreshTokenError() from e


class TokenAuthenticator:
    """Pipeline step that turns a bearer token into an identity.

    Rejects requests whose token is missing, invalid, expired, or revoked
    either individually or for its whole subject.
    """

    def __init__(self, config: AuthConfig, blacklist: TokenBlacklistStore):
        self.config = config
        self.blacklist = blacklist

    async def __call__(self, context: RequestContext) -> StepResult:
        try:
            identity = await self.authenticate(context)
        except AuthError as e:
            return Terminate(e.to_response())
        return Continue(context.with_identity(identity))

    async def authenticate(self, context: RequestContext) -> IdentityClaim:
        token = extract_bearer_token(context.header("Authorization"))
        if not token:
            raise MissingTokenError()

        try:
            payload = decode_access_token(self.config, token)
        except TokenExpiredError:
            logger.debug("Expired access token presented")
            raise
        except InvalidTokenError:
            logger.warning("Invalid access token presented")
            raise

        identity = IdentityClaim.from_payload(payload)
        token_revoked, user_revoked = await asyncio.gather(
            self.blacklist.is_token_blacklisted(token),
            self._user_revoked(identity.id),
        )
        if token_revoked or user_revoked:
            logger.warning(f"Blacklisted token presented for user {identity.id}")
            raise BlacklistedTokenError()

        return identity

    async def _user_revoked(self, user_id: Any) -> bool:
        if user_id is None:
            return False
        return await self.blacklist.is_all_tokens_blacklisted(user_id)


class RoleGate:
    """Pipeline step allowing only identities whose role is in ``allowed_roles``."""

    def __init__(self, allowed_roles: Iterable[str]):
        self.allowed_roles = frozenset(allowed_roles)

    async def __call__(self, context: RequestContext) -> StepResult:
        if not self.allows(context):
            return Terminate(ForbiddenError().to_response())
        return Continue(context)

    def allows(self, context: RequestContext) -> bool:
        identity = context.identity
        if identity is None or not isinstance(identity.role, str):
            return False
        return identity.role in self.allowed_roles


class RefreshHandler:
    """Issues a new access token from a refresh token.

    The refresh token itself is not rotated and remains usable.
    """

    BODY_FIELD = "refreshToken"

    def __init__(self, config: AuthConfig, blacklist: TokenBlacklistStore):
        self.config = config
        self.blacklist = blacklist

    async def __call__(self, context: RequestContext) -> ApiResponse:
        try:
            access_token = await self.refresh(context)
        except AuthError as e:
            return e.to_response()
        return ApiResponse.ok("New access token issued.", {"accessToken": access_token})

    async def refresh(self, context: RequestContext) -> str:
        body = context.body or {}
        refresh_token = body.get(self.BODY_FIELD)
        if not refresh_token:
            raise MissingRefreshTokenError()
        if not isinstance(refresh_token, str):
            raise InvalidRefreshTokenError()

        payload = decode_refresh_token(self.config, refresh_token)

        if await self.blacklist.is_token_blacklisted(refresh_token):
            logger.warning(f"Blacklisted refresh token presented for user {payload.get('id')}")
            raise BlacklistedTokenError("Refresh token is blacklisted.")

        logger.info(f"Issued refreshed access token for user {payload.get('id')}")
        return create_access_token(
            self.config,
            user_id=payload.get("id"),
            email=payload.get("email"),
            role=payload.get("role"),
        )
