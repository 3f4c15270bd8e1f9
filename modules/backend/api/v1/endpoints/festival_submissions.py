"""
Festival Submissions API Endpoints.

A member's private tracker of festival entries.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession, RequestId
from modules.backend.schemas.base import ApiResponse, AckResponse
from modules.backend.schemas.festival import (
    FestivalSubmissionCreate,
    FestivalSubmissionResponse,
    FestivalSubmissionUpdate,
)
from modules.backend.services.festival import FestivalSubmissionService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[FestivalSubmissionResponse],
    status_code=201,
    summary="Track a festival submission",
)
async def create_submission(
    data: FestivalSubmissionCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[FestivalSubmissionResponse]:
    submission = await FestivalSubmissionService(db).create_submission(user, data)
    return ApiResponse(data=FestivalSubmissionResponse.model_validate(submission))


@router.get(
    "",
    response_model=ApiResponse[list[FestivalSubmissionResponse]],
    summary="List your festival submissions",
)
async def list_submissions(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[FestivalSubmissionResponse]]:
    submissions = await FestivalSubmissionService(db).list_own(user.id)
    return ApiResponse(
        data=[FestivalSubmissionResponse.model_validate(s) for s in submissions]
    )


@router.get(
    "/{submission_id}",
    response_model=ApiResponse[FestivalSubmissionResponse],
    summary="Get a festival submission",
)
async def get_submission(
    submission_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[FestivalSubmissionResponse]:
    submission = await FestivalSubmissionService(db).get_submission(user.id, submission_id)
    return ApiResponse(data=FestivalSubmissionResponse.model_validate(submission))


@router.put(
    "/{submission_id}",
    response_model=ApiResponse[FestivalSubmissionResponse],
    summary="Update a festival submission",
)
async def update_submission(
    submission_id: str,
    data: FestivalSubmissionUpdate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[FestivalSubmissionResponse]:
    submission = await FestivalSubmissionService(db).update_submission(
        user.id, submission_id, data,
    )
    return ApiResponse(data=FestivalSubmissionResponse.model_validate(submission))


@router.delete(
    "/{submission_id}",
    response_model=ApiResponse[AckResponse],
    summary="Delete a festival submission",
)
async def delete_submission(
    submission_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[AckResponse]:
    await FestivalSubmissionService(db).delete_submission(user.id, submission_id)
    return ApiResponse(data=AckResponse(message="Submission deleted"))
