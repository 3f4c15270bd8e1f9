"""
Billing Repositories.
"""

from sqlalchemy import func, select

from modules.backend.models.billing import CreditTransaction, MonthlyVeteranCredit, SubscriptionPlan
from modules.backend.models.enums import TransactionType
from modules.backend.models.user import User
from modules.backend.repositories.base import BaseRepository


class SubscriptionPlanRepository(BaseRepository[SubscriptionPlan]):
    model = SubscriptionPlan
    label = "Subscription plan"

    async def list_active(self) -> list[SubscriptionPlan]:
        result = await self.session.execute(
            select(SubscriptionPlan)
            .where(SubscriptionPlan.is_active.is_(True))
            .order_by(SubscriptionPlan.price.asc())
        )
        return list(result.scalars().all())


class CreditTransactionRepository(BaseRepository[CreditTransaction]):
    model = CreditTransaction
    label = "Credit transaction"

    async def list_for_user(self, user_id: str, limit: int = 50) -> list[CreditTransaction]:
        result = await self.session.execute(
            select(CreditTransaction)
            .where(CreditTransaction.user_id == user_id)
            .order_by(CreditTransaction.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_recent_with_users(self, limit: int = 100) -> list[tuple[CreditTransaction, User]]:
        result = await self.session.execute(
            select(CreditTransaction, User)
            .join(User, User.id == CreditTransaction.user_id)
            .order_by(CreditTransaction.created_at.desc())
            .limit(limit)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def sum_amounts(self) -> int:
        result = await self.session.execute(
            select(func.coalesce(func.sum(CreditTransaction.amount), 0))
        )
        return int(result.scalar_one())

    async def purchase_recorded(self, payment_intent_id: str) -> bool:
        result = await self.session.execute(
            select(CreditTransaction.id)
            .where(CreditTransaction.stripe_payment_intent_id == payment_intent_id)
            .where(CreditTransaction.type == TransactionType.PURCHASE)
        )
        return result.scalars().first() is not None


class MonthlyVeteranCreditRepository(BaseRepository[MonthlyVeteranCredit]):
    model = MonthlyVeteranCredit

    async def get_for_month(self, month: str) -> MonthlyVeteranCredit | None:
        result = await self.session.execute(
            select(MonthlyVeteranCredit).where(MonthlyVeteranCredit.month == month)
        )
        return result.scalar_one_or_none()
