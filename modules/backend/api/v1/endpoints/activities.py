"""
Activities API Endpoints.

The community feed.
"""

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import CurrentUser, DbSession
from modules.backend.schemas.activity import ActivityResponse
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.user import UserSummary
from modules.backend.services.activity import ActivityService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[ActivityResponse]],
    summary="Recent community activity",
)
async def recent_activities(
    user: CurrentUser,
    db: DbSession,
    limit: int = Query(default=20, ge=1, le=100),
) -> ApiResponse[list[ActivityResponse]]:
    rows = await ActivityService(db).recent(limit=limit)
    return ApiResponse(
        data=[
            ActivityResponse.model_validate(activity).model_copy(
                update={"user": UserSummary.model_validate(author)}
            )
            for activity, author in rows
        ]
    )


@router.get(
    "/user/{user_id}",
    response_model=ApiResponse[list[ActivityResponse]],
    summary="A member's activity",
)
async def user_activities(
    user_id: str,
    user: CurrentUser,
    db: DbSession,
    limit: int = Query(default=20, ge=1, le=100),
) -> ApiResponse[list[ActivityResponse]]:
    activities = await ActivityService(db).for_user(user_id, limit=limit)
    return ApiResponse(data=[ActivityResponse.model_validate(a) for a in activities])
