"""
Reports API Endpoints.

Moderation review lives under the admin router.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.report import ReportCreate, ReportResponse
from modules.backend.services.report import ReportService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ReportResponse],
    status_code=201,
    summary="Report a member, post or reply",
)
async def create_report(
    data: ReportCreate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[ReportResponse]:
    report = await ReportService(db).create_report(user, data)
    return ApiResponse(data=ReportResponse.model_validate(report))
