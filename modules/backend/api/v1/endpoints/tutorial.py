"""
Tutorial API Endpoints.

Onboarding progress and the one-time welcome package.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.tutorial import (
    TutorialCompleteResponse,
    TutorialProgressUpdate,
    TutorialStateResponse,
)
from modules.backend.services.tutorial import TutorialService

router = APIRouter()


@router.put(
    "/progress",
    response_model=ApiResponse[TutorialStateResponse],
    summary="Save tutorial progress",
)
async def update_progress(
    data: TutorialProgressUpdate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[TutorialStateResponse]:
    updated = await TutorialService(db).update_progress(user, data.step, data.completed)
    return ApiResponse(data=TutorialStateResponse.model_validate(updated))


@router.post(
    "/complete",
    response_model=ApiResponse[TutorialCompleteResponse],
    summary="Finish the tutorial",
    description="Awards the welcome credits the first time only.",
)
async def complete_tutorial(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[TutorialCompleteResponse]:
    updated, awarded = await TutorialService(db).complete(user)
    state = TutorialStateResponse.model_validate(updated)
    return ApiResponse(
        data=TutorialCompleteResponse(**state.model_dump(), credits_awarded=awarded)
    )
