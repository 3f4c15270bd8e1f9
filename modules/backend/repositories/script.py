"""
Script Repository.
"""

from sqlalchemy import func, select

from modules.backend.models.script import Script
from modules.backend.repositories.base import BaseRepository


class ScriptRepository(BaseRepository[Script]):
    model = Script

    async def list_by_author(self, author_id: str, public_only: bool = False) -> list[Script]:
        query = select(Script).where(Script.author_id == author_id)
        if public_only:
            query = query.where(Script.is_public.is_(True))
        result = await self.session.execute(query.order_by(Script.updated_at.desc()))
        return list(result.scalars().all())

    async def count_by_author(self, author_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Script).where(Script.author_id == author_id)
        )
        return result.scalar_one()
