"""
Notification Service.

Stores in-app notifications and pushes them to connected WebSocket
clients when realtime delivery is enabled.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.utils import utc_now
from modules.backend.models.enums import NotificationType
from modules.backend.models.notification import Notification
from modules.backend.realtime.manager import get_connection_manager
from modules.backend.repositories.notification import NotificationRepository
from modules.backend.schemas.notification import NotificationResponse
from modules.backend.services.base import BaseService


class NotificationService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NotificationRepository(session)

    async def notify(
        self,
        user_id: str,
        type: NotificationType,
        title: str,
        message: str,
        action_url: str | None = None,
        related_entity_type: str | None = None,
        related_entity_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Notification:
        """Store a notification and push it to the user's open sockets."""
        notification = await self._execute_db_operation(
            "create_notification",
            self.repo.create(
                user_id=user_id,
                type=type,
                title=title,
                message=message,
                action_url=action_url,
                related_entity_type=related_entity_type,
                related_entity_id=related_entity_id,
                metadata_=metadata,
            ),
        )
        self._log_debug("Notification stored", user_id=user_id, type=str(type))

        if get_app_config().features.realtime_notifications_enabled:
            payload = NotificationResponse.model_validate(notification).model_dump(mode="json")
            await get_connection_manager().send_to_user(
                user_id, {"type": "notification", "data": payload},
            )
        return notification

    async def list_notifications(self, user_id: str, limit: int = 50) -> list[Notification]:
        return await self.repo.list_for_user(user_id, limit=limit)

    async def unread_count(self, user_id: str) -> int:
        return await self.repo.count_unread(user_id)

    async def _get_own(self, user_id: str, notification_id: str) -> Notification:
        notification = await self.repo.get_by_id(notification_id)
        return self._owned(notification, user_id, "user_id", "Notification")

    async def mark_read(self, user_id: str, notification_id: str) -> Notification:
        """
        Mark one notification read.

        Idempotent: read_at keeps the time of the first call.
        """
        notification = await self._get_own(user_id, notification_id)
        if notification.is_read:
            return notification
        return await self.repo.apply(notification, is_read=True, read_at=utc_now())

    async def mark_all_read(self, user_id: str) -> int:
        updated = await self.repo.mark_all_read(user_id, utc_now())
        self._log_operation("Notifications marked read", user_id=user_id, updated=updated)
        return updated

    async def delete_notification(self, user_id: str, notification_id: str) -> None:
        notification = await self._get_own(user_id, notification_id)
        await self.repo.delete(notification)
