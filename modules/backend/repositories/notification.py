"""
Notification Repository.
"""

from datetime import datetime

from sqlalchemy import func, select

from modules.backend.models.notification import Notification
from modules.backend.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    model = Notification

    async def list_for_user(self, user_id: str, limit: int = 50) -> list[Notification]:
        result = await self.session.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_unread(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.is_read.is_(False))
        )
        return result.scalar_one()

    async def mark_all_read(self, user_id: str, read_at: datetime) -> int:
        """Mark every unread notification read. Returns how many changed."""
        result = await self.session.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.is_read.is_(False))
        )
        unread = list(result.scalars().all())
        for notification in unread:
            notification.is_read = True
            notification.read_at = read_at
        await self.session.flush()
        return len(unread)
