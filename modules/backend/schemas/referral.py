"""
Referral Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReferralCodeCreate(BaseModel):
    custom_code: str | None = Field(
        default=None,
        min_length=3,
        max_length=50,
        pattern=r"^[A-Za-z0-9_-]+$",
    )


class ReferralCodeResponse(BaseModel):
    id: str
    code: str
    referrer_reward: int
    referred_reward: int
    minimum_spend: int
    max_uses: int
    current_uses: int
    is_active: bool
    expires_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReferralProcess(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)


class ReferralResponse(BaseModel):
    id: str
    referral_code_id: str
    referrer_id: str
    referred_user_id: str
    referred_user_email: str
    status: str
    qualification_met: bool
    qualification_amount: int
    qualification_date: datetime | None
    referrer_credits_awarded: int
    referred_credits_awarded: int
    credited_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReferralStatsResponse(BaseModel):
    total_referrals: int
    qualified_referrals: int
    total_credits_earned: int
    pending_referrals: int
