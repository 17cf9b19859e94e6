"""Team role API endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import get_request_context, get_team_role_repository, require_roles
from app.core.responses import ApiResponse
from app.schemas.team_role import TeamRoleResponse, TeamRoleSync
from app.services.pipeline import RequestContext
from app.services.team_role import TeamRoleRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/team-roles", tags=["team-roles"])


def _serialize(roles: Any) -> list[dict[str, Any]]:
    return [TeamRoleResponse.model_validate(role).model_dump(mode="json") for role in roles]


@router.get("")
async def list_team_roles(
    _: RequestContext = Depends(get_request_context),
    repository: TeamRoleRepository = Depends(get_team_role_repository),
) -> JSONResponse:
    """List every stored team role."""
    roles = await repository.get_all()
    return ApiResponse.ok("Team roles retrieved.", _serialize(roles)).to_json_response()


@router.get("/{uuid}")
async def get_team_role(
    uuid: str,
    _: RequestContext = Depends(get_request_context),
    repository: TeamRoleRepository = Depends(get_team_role_repository),
) -> JSONResponse:
    """Get one team role by its upstream UUID."""
    role = await repository.get_by_uuid(uuid)
    if role is None:
        return ApiResponse.error("Team role not found.", 404).to_json_response()
    data = TeamRoleResponse.model_validate(role).model_dump(mode="json")
    return ApiResponse.ok("Team role retrieved.", data).to_json_response()


@router.post("/sync")
async def sync_team_roles(
    roles: list[TeamRoleSync],
    context: RequestContext = Depends(require_roles("admin")),
    repository: TeamRoleRepository = Depends(get_team_role_repository),
) -> JSONResponse:
    """Upsert team roles pulled from the upstream source of truth.

    Admin only. The batch fails as a whole on the first database error.
    """
    upserted = await repository.upsert_many(roles)
    logger.info(f"User {context.identity.id} synchronised {len(upserted)} team roles")
    return ApiResponse.ok("Team roles synchronised.", _serialize(upserted)).to_json_response()
