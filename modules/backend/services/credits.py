"""
Credit Service.

The single place member credit balances change. Every movement writes a
signed CreditTransaction, and every deduction re-reads the balance with
a row lock, updates total_credits_used and the spending tier, and
publishes a credits-spent event once the transaction commits.

Super users (security.roles.super_user_emails) are never charged and
always report the configured super-user balance.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import InsufficientCreditsError, ValidationError
from modules.backend.core.security import is_super_user_email
from modules.backend.events.publishers import CreditEventPublisher
from modules.backend.models.billing import CreditTransaction
from modules.backend.models.enums import TransactionType
from modules.backend.models.user import User
from modules.backend.repositories.billing import CreditTransactionRepository
from modules.backend.repositories.user import UserRepository
from modules.backend.services.achievement import AchievementService
from modules.backend.services.base import BaseService


class CreditService(BaseService):
    def __init__(self, session: AsyncSession, correlation_id: str = "internal") -> None:
        super().__init__(session)
        self.users = UserRepository(session)
        self.transactions = CreditTransactionRepository(session)
        self.achievements = AchievementService(session)
        self.publisher = CreditEventPublisher(correlation_id, session=session)

    @staticmethod
    def is_super_user(user: User) -> bool:
        return is_super_user_email(user.email)

    def balance(self, user: User) -> int:
        if self.is_super_user(user):
            return get_app_config().credits.super_user_balance
        return user.credits

    def ensure_can_spend(self, user: User, cost: int) -> None:
        """
        Raises:
            InsufficientCreditsError: Balance below cost (never for super users)
        """
        if self.is_super_user(user):
            return
        if user.credits < cost:
            raise InsufficientCreditsError(required=cost, available=user.credits)

    async def deduct(
        self,
        user: User,
        cost: int,
        description: str,
        related_entity_type: str | None = None,
        related_entity_id: str | None = None,
    ) -> int:
        """
        Charge a member for a paid feature.

        Returns:
            The remaining balance

        Raises:
            InsufficientCreditsError: Balance below cost after re-reading it
        """
        if self.is_super_user(user):
            self._log_debug("Super user bypassed credit charge", user_id=user.id, cost=cost)
            return get_app_config().credits.super_user_balance

        locked = await self.users.get_for_update(user.id)
        if locked.credits < cost:
            raise InsufficientCreditsError(required=cost, available=locked.credits)

        locked.credits -= cost
        locked.total_credits_used += cost
        await self.users.save(locked)
        await self.transactions.create(
            user_id=locked.id,
            amount=-cost,
            type=TransactionType.USAGE,
            description=description,
            related_entity_type=related_entity_type,
            related_entity_id=related_entity_id,
        )
        await self.achievements.track_spending(locked.id, cost)

        self._log_operation(
            "Credits deducted",
            user_id=locked.id,
            cost=cost,
            remaining=locked.credits,
        )
        await self.publisher.credits_spent(locked.id, cost, locked.credits, description)
        return locked.credits

    async def refund(self, user: User, amount: int, description: str) -> int:
        """Reverse a deduction. Returns the new balance."""
        if self.is_super_user(user):
            return get_app_config().credits.super_user_balance

        locked = await self.users.get_for_update(user.id)
        locked.credits += amount
        locked.total_credits_used = max(0, locked.total_credits_used - amount)
        await self.users.save(locked)
        await self.transactions.create(
            user_id=locked.id,
            amount=amount,
            type=TransactionType.REFUND,
            description=description,
        )
        await self.achievements.track_spending(locked.id, -amount)

        self._log_operation("Credits refunded", user_id=locked.id, amount=amount)
        await self.publisher.credits_granted(locked.id, amount, locked.credits, TransactionType.REFUND)
        return locked.credits

    async def grant(
        self,
        user_id: str,
        amount: int,
        type: TransactionType,
        description: str,
        awarded_by: str | None = None,
        stripe_payment_intent_id: str | None = None,
        related_entity_type: str | None = None,
        related_entity_id: str | None = None,
    ) -> User:
        """
        Add credits to a member's balance.

        Raises:
            ValidationError: Non-positive amount
            NotFoundError: Unknown user
        """
        if amount <= 0:
            raise ValidationError("Credit amount must be positive", details={"amount": amount})

        locked = await self.users.get_for_update(user_id)
        locked.credits += amount
        await self.users.save(locked)
        await self.transactions.create(
            user_id=locked.id,
            amount=amount,
            type=type,
            description=description,
            awarded_by=awarded_by,
            stripe_payment_intent_id=stripe_payment_intent_id,
            related_entity_type=related_entity_type,
            related_entity_id=related_entity_id,
        )

        self._log_operation(
            "Credits granted",
            user_id=locked.id,
            amount=amount,
            type=str(type),
            balance=locked.credits,
        )
        await self.publisher.credits_granted(locked.id, amount, locked.credits, type)
        return locked

    async def history(self, user_id: str, limit: int = 50) -> list[CreditTransaction]:
        return await self.transactions.list_for_user(user_id, limit=limit)
