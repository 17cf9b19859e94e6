"""Shared FastAPI dependencies."""

from collections.abc import Awaitable, Callable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.responses import ResponseTerminated
from app.services.auth import AuthConfig, MissingTokenError, RoleGate
from app.services.pipeline import RequestContext, Terminate
from app.services.team_role import TeamRoleRepository
from app.services.token_blacklist import TokenBlacklistService


def get_auth_config(request: Request) -> AuthConfig:
    return request.app.state.auth_config


def get_token_blacklist(request: Request) -> TokenBlacklistService:
    return request.app.state.token_blacklist


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory


def get_team_role_repository(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> TeamRoleRepository:
    """Dependency to get the team role repository."""
    return TeamRoleRepository(session_factory)


def get_request_context(request: Request) -> RequestContext:
    """The authenticated context stored by AuthenticationMiddleware."""
    context = getattr(request.state, "auth_context", None)
    if context is None:
        raise ResponseTerminated(MissingTokenError().to_response())
    return context


def require_roles(*roles: str) -> Callable[..., Awaitable[RequestContext]]:
    """Dependency factory gating a route on the caller's role.

    Usage::

        @router.post("/sync")
        async def sync(context: RequestContext = Depends(require_roles("admin"))): ...
    """
    gate = RoleGate(roles)

    async def _check(context: RequestContext = Depends(get_request_context)) -> RequestContext:
        result = await gate(context)
        if isinstance(result, Terminate):
            raise ResponseTerminated(result.response)
        return result.context

    return _check
