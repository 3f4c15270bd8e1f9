"""
Referrals API Endpoints.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.referral import (
    ReferralCodeCreate,
    ReferralCodeResponse,
    ReferralProcess,
    ReferralResponse,
    ReferralStatsResponse,
)
from modules.backend.services.referral import ReferralService

router = APIRouter()


@router.post(
    "/create-code",
    response_model=ApiResponse[ReferralCodeResponse],
    status_code=201,
    summary="Create a referral code",
    description="Without a custom code, one is derived from your first name.",
)
async def create_code(
    data: ReferralCodeCreate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[ReferralCodeResponse]:
    code = await ReferralService(db).create_code(user, data.custom_code)
    return ApiResponse(data=ReferralCodeResponse.model_validate(code))


@router.get(
    "/my-codes",
    response_model=ApiResponse[list[ReferralCodeResponse]],
    summary="Your referral codes",
)
async def my_codes(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[ReferralCodeResponse]]:
    codes = await ReferralService(db).my_codes(user.id)
    return ApiResponse(data=[ReferralCodeResponse.model_validate(c) for c in codes])


@router.get(
    "/stats",
    response_model=ApiResponse[ReferralStatsResponse],
    summary="Your referral totals",
)
async def referral_stats(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[ReferralStatsResponse]:
    stats = await ReferralService(db).stats(user.id)
    return ApiResponse(data=ReferralStatsResponse(**stats))


@router.get(
    "/history",
    response_model=ApiResponse[list[ReferralResponse]],
    summary="Members you referred",
)
async def referral_history(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[list[ReferralResponse]]:
    referrals = await ReferralService(db).history(user.id)
    return ApiResponse(data=[ReferralResponse.model_validate(r) for r in referrals])


@router.delete(
    "/codes/{code_id}",
    response_model=ApiResponse[ReferralCodeResponse],
    summary="Deactivate a referral code",
)
async def deactivate_code(
    code_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[ReferralCodeResponse]:
    code = await ReferralService(db).deactivate_code(user.id, code_id)
    return ApiResponse(data=ReferralCodeResponse.model_validate(code))


@router.post(
    "/process",
    response_model=ApiResponse[ReferralResponse],
    status_code=201,
    summary="Apply a referral code to your account",
)
async def process_code(
    data: ReferralProcess,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[ReferralResponse]:
    referral = await ReferralService(db).process_code(user, data.code)
    return ApiResponse(data=ReferralResponse.model_validate(referral))
