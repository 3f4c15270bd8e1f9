"""
Achievement and Tier Repositories.
"""

from sqlalchemy import select

from modules.backend.models.achievement import (
    Achievement,
    SpendingTier,
    UserAchievement,
    UserSpending,
)
from modules.backend.repositories.base import BaseRepository


class AchievementRepository(BaseRepository[Achievement]):
    model = Achievement

    async def list_active(self) -> list[Achievement]:
        result = await self.session.execute(
            select(Achievement)
            .where(Achievement.is_active.is_(True))
            .order_by(Achievement.sort_order)
        )
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> Achievement | None:
        result = await self.session.execute(select(Achievement).where(Achievement.name == name))
        return result.scalar_one_or_none()


class UserAchievementRepository(BaseRepository[UserAchievement]):
    model = UserAchievement

    async def list_for_user(self, user_id: str) -> list[tuple[UserAchievement, Achievement]]:
        """Unlocked achievements, most recent first."""
        result = await self.session.execute(
            select(UserAchievement, Achievement)
            .join(Achievement, Achievement.id == UserAchievement.achievement_id)
            .where(UserAchievement.user_id == user_id)
            .order_by(UserAchievement.unlocked_at.desc())
        )
        return [(row[0], row[1]) for row in result.all()]

    async def unlocked_ids(self, user_id: str) -> set[str]:
        result = await self.session.execute(
            select(UserAchievement.achievement_id).where(UserAchievement.user_id == user_id)
        )
        return set(result.scalars().all())


class SpendingTierRepository(BaseRepository[SpendingTier]):
    model = SpendingTier
    label = "Spending tier"

    async def list_active(self) -> list[SpendingTier]:
        """Active tiers in ascending spend order."""
        result = await self.session.execute(
            select(SpendingTier)
            .where(SpendingTier.is_active.is_(True))
            .order_by(SpendingTier.min_spend, SpendingTier.sort_order)
        )
        return list(result.scalars().all())


class UserSpendingRepository(BaseRepository[UserSpending]):
    model = UserSpending

    async def get_for_user(self, user_id: str) -> UserSpending | None:
        result = await self.session.execute(
            select(UserSpending).where(UserSpending.user_id == user_id)
        )
        return result.scalar_one_or_none()
