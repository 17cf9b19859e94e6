# teamsync Services
from app.services.auth import AuthConfig, RefreshHandler, RoleGate, TokenAuthenticator
from app.services.pipeline import Continue, Pipeline, RequestContext, Terminate
from app.services.team_role import TeamRoleRepository
from app.services.token_blacklist import TokenBlacklistService

__all__ = [
    "AuthConfig",
    "Continue",
    "Pipeline",
    "RefreshHandler",
    "RequestContext",
    "RoleGate",
    "TeamRoleRepository",
    "Terminate",
    "TokenAuthenticator",
    "TokenBlacklistService",
]
