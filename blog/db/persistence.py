"""Write-side persistence helpers."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from blog.db.base import Base


class PersistenceService:
    """Insert/update and delete entities within the caller's transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def upsert(self, entity: Base) -> None:
        self.session.add(entity)
        await self.session.flush()

    async def delete(self, entity: Base) -> None:
        await self.session.delete(entity)
        await self.session.flush()


__all__ = ["PersistenceService"]
