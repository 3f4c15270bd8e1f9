"""
Gift Code Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.backend.schemas.base import reject_null


class GiftCodeRedeem(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)


class GiftCodeRedeemResponse(BaseModel):
    credits_received: int
    credits: int


class GiftCodeCreate(BaseModel):
    code: str = Field(..., min_length=3, max_length=50)
    credits: int = Field(..., gt=0)
    description: str | None = Field(default=None, max_length=1000)
    max_uses: int = Field(default=1, ge=1)
    expires_at: datetime | None = None


class GiftCodeUpdate(BaseModel):
    credits: int | None = Field(default=None, gt=0)
    description: str | None = Field(default=None, max_length=1000)
    max_uses: int | None = Field(default=None, ge=1)
    is_active: bool | None = None
    expires_at: datetime | None = None

    @field_validator("credits", "max_uses", "is_active", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class GiftCodeResponse(BaseModel):
    id: str
    code: str
    credits: int
    description: str | None
    max_uses: int
    used_count: int
    is_active: bool
    expires_at: datetime | None
    created_by_id: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
