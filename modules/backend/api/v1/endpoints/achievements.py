"""
Achievements API Endpoints.

Mounted without a prefix: the tier routes live at /spending-tiers and /user/tier.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession
from modules.backend.models.achievement import Achievement, UserAchievement
from modules.backend.schemas.achievement import (
    AchievementResponse,
    AchievementStatsResponse,
    SpendingTierResponse,
    UserAchievementResponse,
    UserTierResponse,
)
from modules.backend.schemas.base import ApiResponse
from modules.backend.services.achievement import AchievementService

router = APIRouter()


def _unlocked(row: tuple[UserAchievement, Achievement]) -> UserAchievementResponse:
    unlocked, achievement = row
    return UserAchievementResponse(
        achievement=AchievementResponse.model_validate(achievement),
        unlocked_at=unlocked.unlocked_at,
        progress=unlocked.progress,
    )


def _tier(tier) -> SpendingTierResponse | None:
    return SpendingTierResponse.model_validate(tier) if tier is not None else None


@router.get(
    "/achievements",
    response_model=ApiResponse[list[AchievementResponse]],
    summary="All active achievements",
)
async def list_achievements(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[AchievementResponse]]:
    achievements = await AchievementService(db).list_achievements()
    return ApiResponse(data=[AchievementResponse.model_validate(a) for a in achievements])


@router.get(
    "/achievements/user",
    response_model=ApiResponse[list[UserAchievementResponse]],
    summary="Your unlocked achievements",
)
async def user_achievements(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[UserAchievementResponse]]:
    rows = await AchievementService(db).user_achievements(user.id)
    return ApiResponse(data=[_unlocked(row) for row in rows])


@router.get(
    "/achievements/stats",
    response_model=ApiResponse[AchievementStatsResponse],
    summary="Achievement progress summary",
)
async def achievement_stats(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[AchievementStatsResponse]:
    stats = await AchievementService(db).stats(user.id)
    return ApiResponse(
        data=AchievementStatsResponse(
            total_achievements=stats["total_achievements"],
            unlocked_achievements=stats["unlocked_achievements"],
            current_tier=_tier(stats["current_tier"]),
            recent_achievements=[_unlocked(row) for row in stats["recent_achievements"]],
        )
    )


@router.get(
    "/spending-tiers",
    response_model=ApiResponse[list[SpendingTierResponse]],
    summary="Spending tiers",
)
async def list_tiers(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[SpendingTierResponse]]:
    tiers = await AchievementService(db).list_tiers()
    return ApiResponse(data=[SpendingTierResponse.model_validate(t) for t in tiers])


@router.get(
    "/user/tier",
    response_model=ApiResponse[UserTierResponse],
    summary="Your spending tier",
)
async def user_tier(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[UserTierResponse]:
    spent, current, upcoming = await AchievementService(db).user_tier(user.id)
    return ApiResponse(
        data=UserTierResponse(
            spending=spent,
            current_tier=_tier(current),
            next_tier=_tier(upcoming),
        )
    )
