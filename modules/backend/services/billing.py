"""
Billing Service.

Credit purchases and subscriptions through Stripe, plus the plan catalog.

Members with a military branch (anything but civilian or not_applicable)
get the configured discount on one-time purchases. Amounts are in cents
and the discounted amount is rounded half up.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import (
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from modules.backend.core.utils import interval_end, utc_now
from modules.backend.integrations.stripe_client import get_stripe_client
from modules.backend.models.billing import SubscriptionPlan
from modules.backend.models.enums import (
    NON_MILITARY_BRANCHES,
    PlanInterval,
    SubscriptionStatus,
    TransactionType,
)
from modules.backend.models.user import User
from modules.backend.repositories.billing import CreditTransactionRepository, SubscriptionPlanRepository
from modules.backend.repositories.user import UserRepository
from modules.backend.schemas.billing import PaymentIntentCreate, SubscriptionStatusResponse
from modules.backend.services.base import BaseService
from modules.backend.services.credits import CreditService
from modules.backend.services.referral import ReferralService

SUPER_USER_PLAN_ID = "super-user"
SUPER_USER_PLAN_NAME = "Super User - Unlimited Access"

DEFAULT_PLANS: list[dict[str, Any]] = [
    {
        "id": "weekly",
        "name": "Weekly Pass",
        "description": "Perfect for short-term projects and testing the platform",
        "price": 500,
        "interval": PlanInterval.WEEK,
        "credits_included": 100,
    },
    {
        "id": "monthly",
        "name": "Monthly Plan",
        "description": "Best value for regular users and ongoing projects",
        "price": 1500,
        "interval": PlanInterval.MONTH,
        "credits_included": 500,
    },
    {
        "id": "yearly",
        "name": "Annual Plan",
        "description": "Maximum savings for serious filmmakers and studios",
        "price": 12000,
        "interval": PlanInterval.YEAR,
        "credits_included": 6000,
    },
]


def qualifies_for_military_discount(user: User) -> bool:
    return bool(user.military_branch) and user.military_branch not in NON_MILITARY_BRANCHES


def apply_discount(amount: int, percent: int) -> int:
    """amount * (100 - percent) / 100, rounded half up."""
    return (amount * (100 - percent) + 50) // 100


class BillingService(BaseService):
    def __init__(self, session: AsyncSession, correlation_id: str = "internal") -> None:
        super().__init__(session)
        self.plans = SubscriptionPlanRepository(session)
        self.transactions = CreditTransactionRepository(session)
        self.users = UserRepository(session)
        self.credits = CreditService(session, correlation_id=correlation_id)

    @staticmethod
    def _require_billing() -> None:
        if not get_app_config().features.billing_enabled:
            raise ValidationError("Billing is currently disabled")

    async def list_plans(self) -> list[SubscriptionPlan]:
        return await self.plans.list_active()

    async def subscription_status(self, user: User) -> SubscriptionStatusResponse | None:
        if self.credits.is_super_user(user):
            return SubscriptionStatusResponse(
                status="active",
                plan_id=SUPER_USER_PLAN_ID,
                plan_name=SUPER_USER_PLAN_NAME,
                expires_at=utc_now() + timedelta(days=365),
                is_super_user=True,
            )
        if not user.subscription_plan_id:
            return None

        plan = await self.plans.get_by_id_or_none(user.subscription_plan_id)
        return SubscriptionStatusResponse(
            status=user.subscription_status,
            plan_id=user.subscription_plan_id,
            plan_name=plan.name if plan else "Unknown Plan",
            expires_at=user.subscription_expires_at,
        )

    async def create_payment_intent(self, user: User, data: PaymentIntentCreate) -> dict[str, Any]:
        """
        Start a one-time credit purchase.

        Returns:
            {client_secret, final_amount, discount_applied}
        """
        self._require_billing()
        percent = get_app_config().credits.military_discount_percent
        discounted = qualifies_for_military_discount(user)
        final_amount = apply_discount(data.amount, percent) if discounted else data.amount

        intent = await get_stripe_client().create_payment_intent(
            final_amount,
            metadata={
                "userId": user.id,
                "credits": data.credits,
                "plan": data.plan or "one_time",
                "originalAmount": data.amount,
                "discountApplied": f"military_{percent}" if discounted else "none",
            },
        )
        self._log_operation(
            "Payment intent created",
            user_id=user.id,
            payment_intent_id=intent.get("id"),
            final_amount=final_amount,
            discounted=discounted,
        )
        return {
            "client_secret": intent["client_secret"],
            "final_amount": final_amount,
            "discount_applied": discounted,
        }

    async def confirm_payment(self, user: User, payment_intent_id: str) -> tuple[int, int]:
        """
        Credit a succeeded payment intent to the member.

        Returns:
            (credits added, new balance)

        Raises:
            ValidationError: Intent has not succeeded, or carries no credits
            AuthorizationError: Intent belongs to another member
            ConflictError: Intent already credited
        """
        self._require_billing()
        intent = await get_stripe_client().retrieve_payment_intent(payment_intent_id)
        if intent.get("status") != "succeeded":
            raise ValidationError("Payment has not succeeded")

        metadata = intent.get("metadata") or {}
        if metadata.get("userId") != user.id:
            self._logger.warning(
                "Payment intent user mismatch",
                extra={"user_id": user.id, "payment_intent_id": payment_intent_id},
            )
            raise AuthorizationError("This payment belongs to another account")

        if await self.transactions.purchase_recorded(payment_intent_id):
            raise ConflictError("Payment has already been applied")

        try:
            credits = int(metadata.get("credits", 0))
        except (TypeError, ValueError) as e:
            raise ValidationError("Payment carries no credit amount") from e
        if credits <= 0:
            raise ValidationError("Payment carries no credit amount")

        updated = await self.credits.grant(
            user.id,
            credits,
            TransactionType.PURCHASE,
            f"Purchased {credits} credits",
            stripe_payment_intent_id=payment_intent_id,
        )

        amount_paid = int(intent.get("amount_received") or intent.get("amount") or 0)
        await ReferralService(self.session).record_purchase(user.id, amount_paid)
        return credits, updated.credits

    async def create_subscription(self, user: User, plan_id: str) -> dict[str, Any]:
        """
        Subscribe the member to a plan.

        Raises:
            ValidationError: Unknown or inactive plan, or no provider price
        """
        self._require_billing()
        plan = await self.plans.get_by_id_or_none(plan_id)
        if plan is None or not plan.is_active or not plan.stripe_price_id:
            raise ValidationError("Invalid subscription plan")

        stripe = get_stripe_client()
        customer_id = user.stripe_customer_id
        if not customer_id:
            customer = await stripe.create_customer(
                user.email, user.display_name, metadata={"userId": user.id},
            )
            customer_id = customer["id"]

        subscription = await stripe.create_subscription(
            customer_id,
            plan.stripe_price_id,
            metadata={
                "userId": user.id,
                "planId": plan.id,
                "creditsIncluded": plan.credits_included,
            },
        )

        period_end = subscription.get("current_period_end")
        if period_end:
            expires_at = datetime.fromtimestamp(period_end, timezone.utc).replace(tzinfo=None)
        else:
            expires_at = interval_end(plan.interval)
        status = subscription.get("status", "incomplete")
        await self.users.apply(
            user,
            stripe_customer_id=customer_id,
            stripe_subscription_id=subscription["id"],
            subscription_plan_id=plan.id,
            subscription_status=status,
            subscription_expires_at=expires_at,
        )
        self._log_operation(
            "Subscription created",
            user_id=user.id,
            plan_id=plan.id,
            subscription_id=subscription["id"],
        )

        invoice = subscription.get("latest_invoice") or {}
        payment_intent = invoice.get("payment_intent") if isinstance(invoice, dict) else None
        return {
            "subscription_id": subscription["id"],
            "status": status,
            "plan_id": plan.id,
            "expires_at": expires_at,
            "client_secret": payment_intent.get("client_secret") if isinstance(payment_intent, dict) else None,
        }

    async def init_plans(self) -> int:
        """Seed the default plans. Returns 0 if any plan already exists."""
        if await self.plans.count() > 0:
            return 0
        discount = get_app_config().credits.military_discount_percent
        for plan in DEFAULT_PLANS:
            await self.plans.create(military_discount=discount, is_active=True, **plan)
        self._log_operation("Default plans created", count=len(DEFAULT_PLANS))
        return len(DEFAULT_PLANS)

    async def expire_subscriptions(self) -> int:
        """Move active subscriptions past their expiry to past_due."""
        lapsed = await self.users.list_lapsed_subscriptions(utc_now())
        for user in lapsed:
            await self.users.apply(user, subscription_status=SubscriptionStatus.PAST_DUE)
        if lapsed:
            self._log_operation("Subscriptions expired", count=len(lapsed))
        return len(lapsed)
