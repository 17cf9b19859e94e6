"""Team role repository - reads and upstream synchronisation."""

import asyncio
import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.team_role import MUTABLE_FIELDS, TeamRole
from app.schemas.team_role import TeamRoleSync

logger = logging.getLogger(__name__)


class TeamRoleRepository:
    """Data access for the ``team_roles`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_all(self) -> list[TeamRole]:
        """Get all stored team roles."""
        async with self.session_factory() as session:
            result = await session.execute(select(TeamRole).order_by(TeamRole.id))
            return list(result.scalars().all())

    async def get_by_uuid(self, uuid: str) -> TeamRole | None:
        """Get a team role by its upstream UUID."""
        async with self.session_factory() as session:
            result = await session.execute(select(TeamRole).where(TeamRole.uuid == uuid))
            return result.scalar_one_or_none()

    async def upsert_many(self, roles: Sequence[TeamRoleSync]) -> list[TeamRole]:
        """Insert or update each role, keyed by UUID.

        Upserts run concurrently, each in its own session and transaction.
        Results follow input order. If any upsert fails the exception
        propagates; upserts that already committed are kept. When a batch
        holds the same UUID twice, the stored row reflects whichever
        statement committed last.
        """
        if not roles:
            return []
        upserted = await asyncio.gather(*(self._upsert(role) for role in roles))
        logger.info(f"Upserted {len(upserted)} team roles")
        return list(upserted)

    async def _upsert(self, role: TeamRoleSync) -> TeamRole:
        values = role.model_dump(include={"uuid", *MUTABLE_FIELDS})
        stmt = (
            insert(TeamRole)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[TeamRole.uuid],
                set_={field: values[field] for field in MUTABLE_FIELDS},
            )
            .returning(TeamRole)
        )
        async with self.session_factory() as session:
            result = await session.execute(
                stmt, execution_options={"populate_existing": True}
            )
            team_role = result.scalar_one()
            await session.commit()
            return team_role
