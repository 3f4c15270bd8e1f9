"""
Admin API Endpoints.

Every route requires an email listed in security.roles.admin_emails.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from modules.backend.core.dependencies import AdminUser, DbSession, RequestId
from modules.backend.core.pagination import (
    PaginationParams,
    create_paginated_response,
    get_pagination_params,
)
from modules.backend.models.enums import ReportStatus
from modules.backend.schemas.achievement import InitAchievementsResponse
from modules.backend.schemas.admin import (
    AdminStatsResponse,
    AdminTransactionResponse,
    AwardCredits,
    InitPlansResponse,
    MonthlyCreditsResult,
    ServiceVerification,
)
from modules.backend.schemas.base import ApiResponse, PaginatedResponse
from modules.backend.schemas.gift_code import GiftCodeCreate, GiftCodeResponse, GiftCodeUpdate
from modules.backend.schemas.report import ReportResponse, ReportStatusUpdate
from modules.backend.schemas.user import UserResponse, UserSummary
from modules.backend.services.achievement import AchievementService
from modules.backend.services.admin import AdminService
from modules.backend.services.billing import BillingService
from modules.backend.services.gift_code import GiftCodeService
from modules.backend.services.report import ReportService

router = APIRouter()


# =============================================================================
# Members
# =============================================================================


@router.get(
    "/users",
    response_model=PaginatedResponse[UserResponse],
    summary="List all members",
)
async def list_users(
    admin: AdminUser,
    db: DbSession,
    request_id: RequestId,
    pagination: PaginationParams = Depends(get_pagination_params),
) -> dict[str, Any]:
    users, total = await AdminService(db).list_users(
        limit=pagination.limit, offset=pagination.offset,
    )
    return create_paginated_response(
        items=users,
        item_schema=UserResponse,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@router.get(
    "/stats",
    response_model=ApiResponse[AdminStatsResponse],
    summary="Platform totals",
)
async def platform_stats(
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[AdminStatsResponse]:
    stats = await AdminService(db).stats()
    return ApiResponse(data=AdminStatsResponse(**stats))


@router.post(
    "/award-credits",
    response_model=ApiResponse[UserResponse],
    summary="Award credits to a member",
)
async def award_credits(
    data: AwardCredits,
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[UserResponse]:
    user = await AdminService(db).award_credits(admin, data.user_id, data.amount, data.reason)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.post(
    "/verify-service",
    response_model=ApiResponse[UserResponse],
    summary="Approve or hold a service verification",
)
async def verify_service(
    data: ServiceVerification,
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[UserResponse]:
    user = await AdminService(db).verify_service(admin, data)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.post(
    "/update-military-service",
    response_model=ApiResponse[UserResponse],
    summary="Record service details and verify the member",
)
async def update_military_service(
    data: ServiceVerification,
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[UserResponse]:
    verified = data.model_copy(update={"verified": True})
    user = await AdminService(db).verify_service(admin, verified)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.get(
    "/verification-requests",
    response_model=ApiResponse[list[UserResponse]],
    summary="Members awaiting verification",
)
async def verification_requests(
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[list[UserResponse]]:
    users = await AdminService(db).verification_requests()
    return ApiResponse(data=[UserResponse.model_validate(u) for u in users])


# =============================================================================
# Credits
# =============================================================================


@router.post(
    "/process-monthly-credits",
    response_model=ApiResponse[MonthlyCreditsResult],
    summary="Give this month's veteran credits",
    description="Runs once per calendar month. A repeat returns 409.",
)
async def process_monthly_credits(
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[MonthlyCreditsResult]:
    result = await AdminService(db).process_monthly_credits(admin_id=admin.id)
    return ApiResponse(data=MonthlyCreditsResult(**result))


@router.get(
    "/credit-transactions",
    response_model=ApiResponse[list[AdminTransactionResponse]],
    summary="Latest credit transactions",
)
async def credit_transactions(
    admin: AdminUser,
    db: DbSession,
    limit: int = Query(default=100, ge=1, le=500),
) -> ApiResponse[list[AdminTransactionResponse]]:
    rows = await AdminService(db).recent_transactions(limit=limit)
    return ApiResponse(
        data=[
            AdminTransactionResponse.model_validate(tx).model_copy(
                update={"user": UserSummary.model_validate(owner)}
            )
            for tx, owner in rows
        ]
    )


# =============================================================================
# Moderation
# =============================================================================


@router.get(
    "/reports",
    response_model=ApiResponse[list[ReportResponse]],
    summary="List reports",
)
async def list_reports(
    admin: AdminUser,
    db: DbSession,
    status: ReportStatus | None = Query(default=None),
) -> ApiResponse[list[ReportResponse]]:
    reports = await ReportService(db).list_reports(status=status)
    return ApiResponse(data=[ReportResponse.model_validate(r) for r in reports])


@router.put(
    "/reports/{report_id}",
    response_model=ApiResponse[ReportResponse],
    summary="Set a report's status",
)
async def update_report(
    report_id: str,
    data: ReportStatusUpdate,
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[ReportResponse]:
    report = await ReportService(db).set_status(report_id, data.status)
    return ApiResponse(data=ReportResponse.model_validate(report))


# =============================================================================
# Gift codes
# =============================================================================


@router.get(
    "/gift-codes",
    response_model=ApiResponse[list[GiftCodeResponse]],
    summary="List gift codes",
)
async def list_gift_codes(
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[list[GiftCodeResponse]]:
    codes = await GiftCodeService(db).list_codes()
    return ApiResponse(data=[GiftCodeResponse.model_validate(c) for c in codes])


@router.post(
    "/gift-codes",
    response_model=ApiResponse[GiftCodeResponse],
    status_code=201,
    summary="Create a gift code",
)
async def create_gift_code(
    data: GiftCodeCreate,
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[GiftCodeResponse]:
    code = await GiftCodeService(db).create_code(admin, data)
    return ApiResponse(data=GiftCodeResponse.model_validate(code))


@router.put(
    "/gift-codes/{code_id}",
    response_model=ApiResponse[GiftCodeResponse],
    summary="Update a gift code",
)
async def update_gift_code(
    code_id: str,
    data: GiftCodeUpdate,
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[GiftCodeResponse]:
    code = await GiftCodeService(db).update_code(code_id, data)
    return ApiResponse(data=GiftCodeResponse.model_validate(code))


@router.delete(
    "/gift-codes/{code_id}",
    response_model=ApiResponse[GiftCodeResponse],
    summary="Deactivate a gift code",
)
async def deactivate_gift_code(
    code_id: str,
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[GiftCodeResponse]:
    code = await GiftCodeService(db).deactivate_code(code_id)
    return ApiResponse(data=GiftCodeResponse.model_validate(code))


# =============================================================================
# Seed data
# =============================================================================


@router.post(
    "/init-plans",
    response_model=ApiResponse[InitPlansResponse],
    summary="Seed the default subscription plans",
)
async def init_plans(
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[InitPlansResponse]:
    created = await BillingService(db).init_plans()
    message = f"Created {created} plans" if created else "Plans already initialized"
    return ApiResponse(data=InitPlansResponse(message=message, plans_created=created))


@router.post(
    "/init-achievements",
    response_model=ApiResponse[InitAchievementsResponse],
    summary="Seed the default tiers and achievements",
)
async def init_achievements(
    admin: AdminUser,
    db: DbSession,
) -> ApiResponse[InitAchievementsResponse]:
    tiers, achievements = await AchievementService(db).init_defaults()
    return ApiResponse(
        data=InitAchievementsResponse(tiers_created=tiers, achievements_created=achievements)
    )
