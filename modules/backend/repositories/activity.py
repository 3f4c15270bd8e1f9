"""
Activity Repository.
"""

from sqlalchemy import select

from modules.backend.models.activity import Activity
from modules.backend.models.user import User
from modules.backend.repositories.base import BaseRepository


class ActivityRepository(BaseRepository[Activity]):
    model = Activity

    async def list_recent(self, limit: int = 20) -> list[tuple[Activity, User]]:
        """Newest activities across the community with their authors."""
        result = await self.session.execute(
            select(Activity, User)
            .join(User, User.id == Activity.user_id)
            .order_by(Activity.created_at.desc())
            .limit(limit)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def list_for_user(self, user_id: str, limit: int = 20) -> list[Activity]:
        result = await self.session.execute(
            select(Activity)
            .where(Activity.user_id == user_id)
            .order_by(Activity.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
