"""
Achievement and Tier Schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class AchievementResponse(BaseModel):
    id: str
    name: str
    description: str
    badge_icon: str
    badge_color: str
    category: str
    requirement: dict[str, Any]
    sort_order: int

    model_config = ConfigDict(from_attributes=True)


class UserAchievementResponse(BaseModel):
    achievement: AchievementResponse
    unlocked_at: datetime
    progress: int


class SpendingTierResponse(BaseModel):
    id: str
    name: str
    description: str | None
    min_spend: int
    max_spend: int | None
    badge_icon: str | None
    badge_color: str | None
    benefits: list[str]
    sort_order: int

    model_config = ConfigDict(from_attributes=True)


class AchievementStatsResponse(BaseModel):
    total_achievements: int
    unlocked_achievements: int
    current_tier: SpendingTierResponse | None
    recent_achievements: list[UserAchievementResponse]


class UserTierResponse(BaseModel):
    spending: int
    current_tier: SpendingTierResponse | None
    next_tier: SpendingTierResponse | None


class InitAchievementsResponse(BaseModel):
    tiers_created: int
    achievements_created: int
