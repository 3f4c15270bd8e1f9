"""
Design Asset Service.

AI-generated images (posters, storyboards, concept art) stored as
assets owned by the member who generated them.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import NotFoundError
from modules.backend.integrations.openai_client import get_openai_client
from modules.backend.models.design_asset import DesignAsset
from modules.backend.models.user import User
from modules.backend.repositories.design_asset import DesignAssetRepository
from modules.backend.schemas.design_asset import DesignAssetGenerate, DesignAssetUpdate
from modules.backend.services.ai import require_ai_tools
from modules.backend.services.base import BaseService


class DesignAssetService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = DesignAssetRepository(session)

    async def generate(self, user: User, data: DesignAssetGenerate) -> DesignAsset:
        """
        Generate an image and store it.

        Raises:
            ExternalServiceError: The image provider failed
        """
        require_ai_tools()
        size = get_app_config().integrations.openai.image_size
        self._log_operation("Generating design asset", user_id=user.id, asset_type=data.asset_type)
        image_url = await get_openai_client().generate_image(data.prompt, size=size)

        return await self._execute_db_operation(
            "create_design_asset",
            self.repo.create(
                creator_id=user.id,
                image_url=image_url,
                dimensions=size,
                **data.model_dump(),
            ),
        )

    async def list_own(self, user_id: str) -> list[DesignAsset]:
        return await self.repo.list_by_creator(user_id)

    async def list_public(self, limit: int = 50) -> list[DesignAsset]:
        return await self.repo.list_public(limit=limit)

    async def get_asset(self, user_id: str, asset_id: str) -> DesignAsset:
        asset = await self.repo.get_by_id(asset_id)
        if asset.creator_id != user_id and not asset.is_public:
            raise NotFoundError("Design asset not found")
        return asset

    async def update_asset(self, user_id: str, asset_id: str, data: DesignAssetUpdate) -> DesignAsset:
        asset = self._owned(await self.repo.get_by_id(asset_id), user_id, "creator_id", "Design asset")
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return asset
        return await self.repo.apply(asset, **update_data)

    async def delete_asset(self, user_id: str, asset_id: str) -> None:
        asset = self._owned(await self.repo.get_by_id(asset_id), user_id, "creator_id", "Design asset")
        self._log_operation("Deleting design asset", asset_id=asset_id)
        await self.repo.delete(asset)

    async def record_download(self, asset_id: str) -> DesignAsset:
        asset = await self.repo.get_by_id(asset_id)
        return await self.repo.apply(asset, download_count=asset.download_count + 1)
