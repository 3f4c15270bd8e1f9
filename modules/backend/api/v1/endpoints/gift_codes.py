"""
Gift Codes API Endpoints.

Redemption only. Code management is under the admin router.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.gift_code import GiftCodeRedeem, GiftCodeRedeemResponse
from modules.backend.services.gift_code import GiftCodeService

router = APIRouter()


@router.post(
    "/redeem",
    response_model=ApiResponse[GiftCodeRedeemResponse],
    summary="Redeem a gift code",
)
async def redeem(
    data: GiftCodeRedeem,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[GiftCodeRedeemResponse]:
    received, balance = await GiftCodeService(db).redeem(user, data.code)
    return ApiResponse(
        data=GiftCodeRedeemResponse(credits_received=received, credits=balance)
    )
