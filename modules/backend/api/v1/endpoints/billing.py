"""
Billing API Endpoints.

Credit balance, plans, one-time credit purchases and subscriptions.
"""

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import CurrentUser, DbSession, RequestId
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.billing import (
    CreditBalanceResponse,
    CreditTransactionResponse,
    PaymentConfirm,
    PaymentConfirmResponse,
    PaymentIntentCreate,
    PaymentIntentResponse,
    SubscriptionCreate,
    SubscriptionCreateResponse,
    SubscriptionPlanResponse,
    SubscriptionStatusResponse,
)
from modules.backend.services.billing import BillingService
from modules.backend.services.credits import CreditService

router = APIRouter()


@router.get(
    "/credits",
    response_model=ApiResponse[CreditBalanceResponse],
    summary="Your credit balance",
)
async def get_credits(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[CreditBalanceResponse]:
    credits = CreditService(db)
    return ApiResponse(
        data=CreditBalanceResponse(
            credits=credits.balance(user),
            total_credits_used=user.total_credits_used,
        )
    )


@router.get(
    "/subscription-status",
    response_model=ApiResponse[SubscriptionStatusResponse | None],
    summary="Your subscription",
)
async def subscription_status(
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[SubscriptionStatusResponse | None]:
    status = await BillingService(db).subscription_status(user)
    return ApiResponse(data=status)


@router.get(
    "/transactions",
    response_model=ApiResponse[list[CreditTransactionResponse]],
    summary="Your credit history",
)
async def list_transactions(
    user: CurrentUser,
    db: DbSession,
    limit: int = Query(default=50, ge=1, le=200),
) -> ApiResponse[list[CreditTransactionResponse]]:
    transactions = await CreditService(db).history(user.id, limit=limit)
    return ApiResponse(
        data=[CreditTransactionResponse.model_validate(t) for t in transactions]
    )


@router.get(
    "/plans",
    response_model=ApiResponse[list[SubscriptionPlanResponse]],
    summary="Available subscription plans",
)
async def list_plans(db: DbSession) -> ApiResponse[list[SubscriptionPlanResponse]]:
    plans = await BillingService(db).list_plans()
    return ApiResponse(data=[SubscriptionPlanResponse.model_validate(p) for p in plans])


@router.post(
    "/create-payment-intent",
    response_model=ApiResponse[PaymentIntentResponse],
    summary="Start a credit purchase",
    description="Members with a military branch on file get the configured discount.",
)
async def create_payment_intent(
    data: PaymentIntentCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[PaymentIntentResponse]:
    intent = await BillingService(db, correlation_id=request_id).create_payment_intent(user, data)
    return ApiResponse(data=PaymentIntentResponse(**intent))


@router.post(
    "/confirm-payment",
    response_model=ApiResponse[PaymentConfirmResponse],
    summary="Credit a succeeded payment",
)
async def confirm_payment(
    data: PaymentConfirm,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[PaymentConfirmResponse]:
    credits_added, balance = await BillingService(
        db, correlation_id=request_id,
    ).confirm_payment(user, data.payment_intent_id)
    return ApiResponse(
        data=PaymentConfirmResponse(credits_added=credits_added, credits=balance)
    )


@router.post(
    "/create-subscription",
    response_model=ApiResponse[SubscriptionCreateResponse],
    summary="Subscribe to a plan",
)
async def create_subscription(
    data: SubscriptionCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[SubscriptionCreateResponse]:
    subscription = await BillingService(
        db, correlation_id=request_id,
    ).create_subscription(user, data.plan_id)
    return ApiResponse(data=SubscriptionCreateResponse(**subscription))
