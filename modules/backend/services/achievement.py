"""
Achievement Service.

Spending tiers and achievement unlocking.

Tier resolution: a member is in the tier whose min_spend <= spent and
whose max_spend is null or >= spent. The next tier is the first tier,
in ascending min_spend order, with min_spend > spent.

Achievements carry a requirement {type, amount}. evaluate_user() unlocks
every active achievement whose requirement the member currently meets;
running it again unlocks nothing new.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.utils import utc_now
from modules.backend.models.achievement import Achievement, SpendingTier, UserAchievement, UserSpending
from modules.backend.models.enums import (
    AchievementCategory,
    RelationshipType,
    RequirementType,
    UserRole,
)
from modules.backend.models.user import User
from modules.backend.repositories.achievement import (
    AchievementRepository,
    SpendingTierRepository,
    UserAchievementRepository,
    UserSpendingRepository,
)
from modules.backend.repositories.forum import ForumPostRepository
from modules.backend.repositories.friend import FriendshipRepository
from modules.backend.repositories.project import ProjectRepository
from modules.backend.repositories.script import ScriptRepository
from modules.backend.repositories.user import UserRepository
from modules.backend.services.base import BaseService

DEFAULT_TIERS: list[dict[str, Any]] = [
    {
        "name": "Recruit",
        "description": "Welcome to the unit",
        "min_spend": 0,
        "max_spend": 99,
        "badge_icon": "shield",
        "badge_color": "text-gray-500",
        "benefits": ["Community access"],
        "sort_order": 1,
    },
    {
        "name": "Private",
        "description": "Getting started with the creative tools",
        "min_spend": 100,
        "max_spend": 499,
        "badge_icon": "star",
        "badge_color": "text-green-600",
        "benefits": ["Profile badge"],
        "sort_order": 2,
    },
    {
        "name": "Sergeant",
        "description": "A regular on set",
        "min_spend": 500,
        "max_spend": 1999,
        "badge_icon": "award",
        "badge_color": "text-blue-600",
        "benefits": ["Profile badge", "Forum flair"],
        "sort_order": 3,
    },
    {
        "name": "Captain",
        "description": "Leading productions",
        "min_spend": 2000,
        "max_spend": 4999,
        "badge_icon": "medal",
        "badge_color": "text-purple-600",
        "benefits": ["Profile badge", "Forum flair", "Priority support"],
        "sort_order": 4,
    },
    {
        "name": "General",
        "description": "Top of the chain of command",
        "min_spend": 5000,
        "max_spend": None,
        "badge_icon": "crown",
        "badge_color": "text-yellow-500",
        "benefits": ["Profile badge", "Forum flair", "Priority support", "Early feature access"],
        "sort_order": 5,
    },
]

DEFAULT_ACHIEVEMENTS: list[dict[str, Any]] = [
    {
        "name": "First Draft",
        "description": "Create your first script",
        "badge_icon": "file-text",
        "badge_color": "text-blue-500",
        "category": AchievementCategory.CONTENT,
        "requirement": {"type": RequirementType.SCRIPTS_CREATED, "amount": 1},
        "sort_order": 1,
    },
    {
        "name": "Prolific Writer",
        "description": "Create ten scripts",
        "badge_icon": "book-open",
        "badge_color": "text-blue-700",
        "category": AchievementCategory.CONTENT,
        "requirement": {"type": RequirementType.SCRIPTS_CREATED, "amount": 10},
        "sort_order": 2,
    },
    {
        "name": "Greenlit",
        "description": "Start your first project",
        "badge_icon": "film",
        "badge_color": "text-red-500",
        "category": AchievementCategory.CONTENT,
        "requirement": {"type": RequirementType.PROJECTS_CREATED, "amount": 1},
        "sort_order": 3,
    },
    {
        "name": "Town Crier",
        "description": "Write five forum posts",
        "badge_icon": "message-square",
        "badge_color": "text-orange-500",
        "category": AchievementCategory.SOCIAL,
        "requirement": {"type": RequirementType.FORUM_POSTS, "amount": 5},
        "sort_order": 4,
    },
    {
        "name": "Squad Up",
        "description": "Make five friends",
        "badge_icon": "users",
        "badge_color": "text-green-500",
        "category": AchievementCategory.SOCIAL,
        "requirement": {"type": RequirementType.FRIENDS, "amount": 5},
        "sort_order": 5,
    },
    {
        "name": "First Investment",
        "description": "Spend your first 100 credits",
        "badge_icon": "coins",
        "badge_color": "text-yellow-500",
        "category": AchievementCategory.SPENDING,
        "requirement": {"type": RequirementType.CREDITS_SPENT, "amount": 100},
        "sort_order": 6,
    },
    {
        "name": "Executive Producer",
        "description": "Spend 1000 credits",
        "badge_icon": "gem",
        "badge_color": "text-purple-500",
        "category": AchievementCategory.SUPPORTER,
        "requirement": {"type": RequirementType.CREDITS_SPENT, "amount": 1000},
        "sort_order": 7,
    },
    {
        "name": "Bravo Zulu",
        "description": "Verified veteran or active-duty member",
        "badge_icon": "flag",
        "badge_color": "text-indigo-600",
        "category": AchievementCategory.VETERAN,
        "requirement": {"type": RequirementType.VERIFIED_VETERAN, "amount": 1},
        "sort_order": 8,
    },
]


def resolve_tier(tiers: Sequence[SpendingTier], spent: int) -> SpendingTier | None:
    """The tier whose band contains `spent`, or None."""
    for tier in tiers:
        if tier.min_spend <= spent and (tier.max_spend is None or spent <= tier.max_spend):
            return tier
    return None


def next_tier(tiers: Sequence[SpendingTier], spent: int) -> SpendingTier | None:
    """The first tier (ascending min_spend) not yet reached."""
    for tier in sorted(tiers, key=lambda t: t.min_spend):
        if tier.min_spend > spent:
            return tier
    return None


class AchievementService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.achievements = AchievementRepository(session)
        self.unlocked = UserAchievementRepository(session)
        self.tiers = SpendingTierRepository(session)
        self.spending = UserSpendingRepository(session)
        self.users = UserRepository(session)

    async def list_achievements(self) -> list[Achievement]:
        return await self.achievements.list_active()

    async def list_tiers(self) -> list[SpendingTier]:
        return await self.tiers.list_active()

    async def user_achievements(self, user_id: str) -> list[tuple[UserAchievement, Achievement]]:
        return await self.unlocked.list_for_user(user_id)

    async def track_spending(self, user_id: str, amount: int) -> UserSpending:
        """
        Add (or, for refunds, subtract) spent credits and re-resolve the tier.
        """
        spending = await self.spending.get_for_user(user_id)
        if spending is None:
            spending = await self.spending.create(user_id=user_id, total_credits_spent=0)

        total = max(0, spending.total_credits_spent + amount)
        tier = resolve_tier(await self.tiers.list_active(), total)
        tier_id = tier.id if tier else None

        changes: dict[str, Any] = {"total_credits_spent": total}
        if tier_id != spending.current_tier_id:
            changes["current_tier_id"] = tier_id
            changes["last_tier_update"] = utc_now()
            self._log_operation("Spending tier changed", user_id=user_id, tier=tier.name if tier else None)
        return await self.spending.apply(spending, **changes)

    async def user_tier(
        self, user_id: str,
    ) -> tuple[int, SpendingTier | None, SpendingTier | None]:
        """Returns (credits spent, current tier, next tier)."""
        spending = await self.spending.get_for_user(user_id)
        spent = spending.total_credits_spent if spending else 0
        tiers = await self.tiers.list_active()
        return spent, resolve_tier(tiers, spent), next_tier(tiers, spent)

    async def stats(self, user_id: str, recent: int = 5) -> dict[str, Any]:
        total = len(await self.achievements.list_active())
        unlocked = await self.unlocked.list_for_user(user_id)
        _, current, _ = await self.user_tier(user_id)
        return {
            "total_achievements": total,
            "unlocked_achievements": len(unlocked),
            "current_tier": current,
            "recent_achievements": unlocked[:recent],
        }

    async def _progress(self, user: User, requirement_type: str) -> int:
        if requirement_type == RequirementType.CREDITS_SPENT:
            spending = await self.spending.get_for_user(user.id)
            return spending.total_credits_spent if spending else 0
        if requirement_type == RequirementType.SCRIPTS_CREATED:
            return await ScriptRepository(self.session).count_by_author(user.id)
        if requirement_type == RequirementType.PROJECTS_CREATED:
            return await ProjectRepository(self.session).count_by_creator(user.id)
        if requirement_type == RequirementType.FORUM_POSTS:
            return await ForumPostRepository(self.session).count_by_author(user.id)
        if requirement_type == RequirementType.FRIENDS:
            return await FriendshipRepository(self.session).count_for_user(user.id)
        if requirement_type == RequirementType.VERIFIED_VETERAN:
            is_veteran = (
                user.role == UserRole.VERIFIED
                and user.relationship_type in (RelationshipType.VETERAN, RelationshipType.ACTIVE_DUTY)
            )
            return 1 if is_veteran else 0
        self._logger.warning("Unknown achievement requirement", extra={"type": requirement_type})
        return 0

    async def evaluate_user(self, user_id: str) -> list[Achievement]:
        """Unlock every achievement the user now qualifies for. Returns the new ones."""
        user = await self.users.get_by_id(user_id)
        already = await self.unlocked.unlocked_ids(user_id)
        progress_cache: dict[str, int] = {}
        newly_unlocked = []

        for achievement in await self.achievements.list_active():
            if achievement.id in already:
                continue
            requirement_type = achievement.requirement.get("type", "")
            required = int(achievement.requirement.get("amount", 1))
            if requirement_type not in progress_cache:
                progress_cache[requirement_type] = await self._progress(user, requirement_type)
            progress = progress_cache[requirement_type]
            if progress >= required:
                await self.unlocked.create(
                    user_id=user_id,
                    achievement_id=achievement.id,
                    progress=progress,
                )
                newly_unlocked.append(achievement)

        if newly_unlocked:
            self._log_operation(
                "Achievements unlocked",
                user_id=user_id,
                achievements=[a.name for a in newly_unlocked],
            )
        return newly_unlocked

    async def evaluate_all(self) -> int:
        """Evaluate every member. Returns the number of achievements unlocked."""
        total = 0
        for user_id in await self.users.list_ids():
            total += len(await self.evaluate_user(user_id))
        return total

    async def init_defaults(self) -> tuple[int, int]:
        """
        Seed the default tiers and achievements that do not exist yet.

        Returns:
            (tiers created, achievements created)
        """
        existing_tiers = {tier.name for tier in await self.tiers.list_active()}
        tiers_created = 0
        for tier in DEFAULT_TIERS:
            if tier["name"] not in existing_tiers:
                await self.tiers.create(**tier)
                tiers_created += 1

        achievements_created = 0
        for achievement in DEFAULT_ACHIEVEMENTS:
            if await self.achievements.get_by_name(achievement["name"]) is None:
                await self.achievements.create(**achievement)
                achievements_created += 1

        self._log_operation(
            "Achievement defaults seeded",
            tiers_created=tiers_created,
            achievements_created=achievements_created,
        )
        return tiers_created, achievements_created
