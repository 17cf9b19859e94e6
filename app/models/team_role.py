"""Team role model - roles synchronised from the upstream team module."""

from typing import Any

from sqlalchemy import Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel

# Columns an upsert may overwrite; id, uuid and created_at are fixed at insert
MUTABLE_FIELDS = ("identifier", "display", "name", "members", "creator")


class TeamRole(BaseModel):
    """A team role keyed by its upstream UUID.

    ``members`` and ``creator`` are stored as delivered by the upstream
    source, so their shape is whatever that system sends.
    """

    __tablename__ = "team_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    identifier: Mapped[str | None] = mapped_column(String(255), nullable=True)
    display: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    members: Mapped[Any | None] = mapped_column(JSONB, nullable=True)
    creator: Mapped[Any | None] = mapped_column(JSONB, nullable=True)

    def __repr__(self) -> str:
        return f"<TeamRole(uuid={self.uuid!r}, name={self.name!r})>"
