"""Pydantic schemas for team roles."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TeamRoleSync(BaseModel):
    """A team role as delivered by the upstream source of truth."""

    model_config = ConfigDict(extra="ignore")

    uuid: str = Field(..., min_length=1, max_length=64)
    identifier: str | None = Field(None, max_length=255)
    display: str | None = Field(None, max_length=255)
    name: str | None = Field(None, max_length=255)
    members: Any = None
    creator: Any = None


class TeamRoleResponse(BaseModel):
    """Stored team role."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: str
    identifier: str | None
    display: str | None
    name: str | None
    members: Any
    creator: Any
    created_at: datetime
