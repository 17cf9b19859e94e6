# teamsync Models
from app.models.base import BaseModel
from app.models.team_role import TeamRole
from app.models.token_blacklist import TokenBlacklist, UserTokenRevocation

__all__ = [
    "BaseModel",
    "TeamRole",
    "TokenBlacklist",
    "UserTokenRevocation",
]
