"""Authentication API endpoints."""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.api.deps import get_auth_config, get_token_blacklist
from app.core.responses import ApiResponse
from app.services.auth import (
    AuthConfig,
    InvalidRefreshTokenError,
    RefreshHandler,
    TokenAuthenticator,
    decode_refresh_token,
    extract_bearer_token,
)
from app.services.pipeline import Pipeline, RequestContext, Terminate
from app.services.token_blacklist import TokenBlacklistService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


async def _read_json_body(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object; anything else counts as empty."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


# Blacklist expiry for tokens without an exp claim; such rows are never cleaned up.
NEVER_EXPIRES = datetime(9999, 12, 31, tzinfo=UTC)


def _expiry(payload: dict[str, Any]) -> datetime:
    exp = payload.get("exp")
    if exp is None:
        return NEVER_EXPIRES
    return datetime.fromtimestamp(exp, tz=UTC)


@router.post("/refresh")
async def refresh_access_token(
    request: Request,
    config: AuthConfig = Depends(get_auth_config),
    blacklist: TokenBlacklistService = Depends(get_token_blacklist),
) -> JSONResponse:
    """Exchange a refresh token for a new 15-minute access token.

    The refresh token is not rotated.
    """
    context = RequestContext(headers=dict(request.headers), body=await _read_json_body(request))
    response = await RefreshHandler(config, blacklist)(context)
    return response.to_json_response()


@router.post("/logout")
async def logout(
    request: Request,
    config: AuthConfig = Depends(get_auth_config),
    blacklist: TokenBlacklistService = Depends(get_token_blacklist),
) -> JSONResponse:
    """Revoke the presented access token and, if given, the body's refresh token.

    Both stay blacklisted until they would have expired.
    """
    context = RequestContext(headers=dict(request.headers), body=await _read_json_body(request))
    result = await Pipeline([TokenAuthenticator(config, blacklist)]).run(context)
    if isinstance(result, Terminate):
        return result.response.to_json_response()

    identity = result.context.identity
    access_token = extract_bearer_token(context.header("Authorization"))
    await blacklist.blacklist_token(access_token, _expiry(identity.claims))

    refresh_token = (context.body or {}).get(RefreshHandler.BODY_FIELD)
    if isinstance(refresh_token, str) and refresh_token:
        try:
            refresh_payload = decode_refresh_token(config, refresh_token)
        except InvalidRefreshTokenError:
            logger.debug("Ignoring unusable refresh token on logout")
        else:
            await blacklist.blacklist_token(refresh_token, _expiry(refresh_payload))

    logger.info(f"User logged out: {identity.id}")
    return ApiResponse.ok("Logged out successfully.").to_json_response()
