"""
Billing Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreditBalanceResponse(BaseModel):
    credits: int
    total_credits_used: int


class SubscriptionPlanResponse(BaseModel):
    id: str
    name: str
    description: str | None
    price: int = Field(description="Price in cents")
    interval: str
    credits_included: int
    military_discount: int
    is_active: bool
    features: list[str]

    model_config = ConfigDict(from_attributes=True)


class SubscriptionStatusResponse(BaseModel):
    status: str
    plan_id: str
    plan_name: str
    expires_at: datetime | None = None
    is_super_user: bool = False


class CreditTransactionResponse(BaseModel):
    id: str
    user_id: str
    amount: int
    type: str
    description: str | None
    related_entity_type: str | None
    related_entity_id: str | None
    stripe_payment_intent_id: str | None
    awarded_by: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentIntentCreate(BaseModel):
    amount: int = Field(..., gt=0, description="Amount in cents before discounts")
    credits: int = Field(..., gt=0)
    plan: str | None = Field(default=None, max_length=50)


class PaymentIntentResponse(BaseModel):
    client_secret: str
    final_amount: int
    discount_applied: bool


class PaymentConfirm(BaseModel):
    payment_intent_id: str = Field(..., min_length=1)


class PaymentConfirmResponse(BaseModel):
    credits_added: int
    credits: int


class SubscriptionCreate(BaseModel):
    plan_id: str = Field(..., min_length=1)


class SubscriptionCreateResponse(BaseModel):
    subscription_id: str
    status: str
    plan_id: str
    expires_at: datetime
    client_secret: str | None = None
