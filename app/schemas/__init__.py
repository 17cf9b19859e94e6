# teamsync Schemas
from app.schemas.team_role import TeamRoleResponse, TeamRoleSync

__all__ = [
    "TeamRoleResponse",
    "TeamRoleSync",
]
