"""
Admin Schemas.
"""

from pydantic import BaseModel, Field

from modules.backend.models.enums import MilitaryBranch, RelationshipType
from modules.backend.schemas.billing import CreditTransactionResponse
from modules.backend.schemas.user import UserSummary


class AdminStatsResponse(BaseModel):
    total_users: int
    verified_veterans: int
    total_scripts: int
    total_projects: int
    credits_awarded: int


class AwardCredits(BaseModel):
    user_id: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
    reason: str = Field(..., min_length=1, max_length=500)


class ServiceVerification(BaseModel):
    user_id: str = Field(..., min_length=1)
    service_type: RelationshipType
    branch: MilitaryBranch | None = None
    years_served: int | None = Field(default=None, ge=0, le=80)
    verified: bool = True


class MonthlyCreditsResult(BaseModel):
    veterans_awarded: int
    total_credits: int
    month: str


class AdminTransactionResponse(CreditTransactionResponse):
    user: UserSummary | None = None


class InitPlansResponse(BaseModel):
    message: str
    plans_created: int
