"""
Activity Service.

Community feed entries recorded as side effects of other operations.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.activity import Activity
from modules.backend.models.enums import ActivityType
from modules.backend.models.user import User
from modules.backend.repositories.activity import ActivityRepository
from modules.backend.services.base import BaseService


class ActivityService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ActivityRepository(session)

    async def record(
        self,
        user_id: str,
        type: ActivityType,
        description: str,
        metadata: dict[str, Any] | None = None,
    ) -> Activity:
        activity = await self._execute_db_operation(
            "record_activity",
            self.repo.create(
                user_id=user_id,
                type=type,
                description=description,
                metadata_=metadata,
            ),
        )
        self._log_debug("Activity recorded", user_id=user_id, type=str(type))
        return activity

    async def recent(self, limit: int = 20) -> list[tuple[Activity, User]]:
        return await self.repo.list_recent(limit=limit)

    async def for_user(self, user_id: str, limit: int = 20) -> list[Activity]:
        return await self.repo.list_for_user(user_id, limit=limit)
