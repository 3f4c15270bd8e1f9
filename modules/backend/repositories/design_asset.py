"""
Design Asset Repository.
"""

from sqlalchemy import select

from modules.backend.models.design_asset import DesignAsset
from modules.backend.repositories.base import BaseRepository


class DesignAssetRepository(BaseRepository[DesignAsset]):
    model = DesignAsset
    label = "Design asset"

    async def list_by_creator(self, creator_id: str) -> list[DesignAsset]:
        result = await self.session.execute(
            select(DesignAsset)
            .where(DesignAsset.creator_id == creator_id)
            .order_by(DesignAsset.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_public(self, limit: int = 50) -> list[DesignAsset]:
        result = await self.session.execute(
            select(DesignAsset)
            .where(DesignAsset.is_public.is_(True))
            .order_by(DesignAsset.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
