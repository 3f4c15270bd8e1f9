"""
Referral Service.

Members create referral codes and new members redeem them. A referral
starts pending; once the referred member's confirmed purchases reach
the code's minimum spend it qualifies, both parties are paid a
referral_bonus, and it is marked credited. This happens at most once.
"""

import re

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import ConflictError, NotFoundError, ValidationError
from modules.backend.core.utils import random_digits, utc_now
from modules.backend.models.enums import NotificationType, ReferralStatus, TransactionType
from modules.backend.models.referral import Referral, ReferralCode
from modules.backend.models.user import User
from modules.backend.repositories.referral import ReferralCodeRepository, ReferralRepository
from modules.backend.services.base import BaseService
from modules.backend.services.credits import CreditService
from modules.backend.services.notification import NotificationService

DEFAULT_CODE_PREFIX = "BRAVO"


def default_code_for(user: User) -> str:
    """First name uppercased (letters and digits only) plus four random digits."""
    prefix = re.sub(r"[^A-Z0-9]", "", (user.first_name or "").upper()) or DEFAULT_CODE_PREFIX
    return f"{prefix}{random_digits(4)}"


class ReferralService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.codes = ReferralCodeRepository(session)
        self.referrals = ReferralRepository(session)
        self.credits = CreditService(session)
        self.notifications = NotificationService(session)

    async def create_code(self, user: User, custom_code: str | None = None) -> ReferralCode:
        """
        Raises:
            ConflictError: Code already taken
        """
        code = custom_code.strip().upper() if custom_code else default_code_for(user)
        if await self.codes.get_by_code(code) is not None:
            raise ConflictError("Referral code already exists")

        defaults = get_app_config().credits.referral
        referral_code = await self._execute_db_operation(
            "create_referral_code",
            self.codes.create(
                user_id=user.id,
                code=code,
                referrer_reward=defaults.referrer_reward,
                referred_reward=defaults.referred_reward,
                minimum_spend=defaults.minimum_spend,
                max_uses=defaults.max_uses,
            ),
        )
        self._log_operation("Referral code created", user_id=user.id, code=code)
        return referral_code

    async def my_codes(self, user_id: str) -> list[ReferralCode]:
        return await self.codes.list_for_user(user_id)

    async def deactivate_code(self, user_id: str, code_id: str) -> ReferralCode:
        code = self._owned(await self.codes.get_by_id(code_id), user_id, "user_id", "Referral code")
        return await self.codes.apply(code, is_active=False)

    async def history(self, user_id: str) -> list[Referral]:
        return await self.referrals.list_for_referrer(user_id)

    async def stats(self, user_id: str) -> dict[str, int]:
        referrals = await self.referrals.list_for_referrer(user_id)
        paid = (ReferralStatus.QUALIFIED, ReferralStatus.CREDITED)
        return {
            "total_referrals": len(referrals),
            "qualified_referrals": sum(1 for r in referrals if r.status in paid),
            "total_credits_earned": sum(r.referrer_credits_awarded for r in referrals),
            "pending_referrals": sum(1 for r in referrals if r.status == ReferralStatus.PENDING),
        }

    async def process_code(self, user: User, code: str) -> Referral:
        """
        Attach the user to the owner of a referral code.

        Raises:
            NotFoundError: Unknown code
            ValidationError: Inactive, expired or used-up code, or self-referral
            ConflictError: User has already been referred
        """
        referral_code = await self.codes.get_by_code(code)
        if referral_code is None:
            raise NotFoundError("Referral code not found")
        if not referral_code.is_active:
            raise ValidationError("Referral code is no longer active")
        if referral_code.expires_at and referral_code.expires_at < utc_now():
            raise ValidationError("Referral code has expired")
        if referral_code.current_uses >= referral_code.max_uses:
            raise ValidationError("Referral code has reached its usage limit")
        if referral_code.user_id == user.id:
            raise ValidationError("You cannot use your own referral code")
        if await self.referrals.get_by_referred_user(user.id) is not None:
            raise ConflictError("You have already been referred")

        referral = await self.referrals.create(
            referral_code_id=referral_code.id,
            referrer_id=referral_code.user_id,
            referred_user_id=user.id,
            referred_user_email=user.email,
        )
        await self.codes.apply(referral_code, current_uses=referral_code.current_uses + 1)
        self._log_operation(
            "Referral recorded",
            referrer_id=referral_code.user_id,
            referred_user_id=user.id,
        )

        if referral_code.minimum_spend <= 0:
            referral = await self._qualify(referral, referral_code)
        return referral

    async def record_purchase(self, user_id: str, amount: int) -> Referral | None:
        """
        Count a confirmed purchase (in cents) toward the user's referral.

        Returns the referral if one exists, qualified if this purchase
        reached the minimum spend.
        """
        referral = await self.referrals.get_by_referred_user(user_id)
        if referral is None or referral.status != ReferralStatus.PENDING:
            return referral

        referral = await self.referrals.apply(
            referral, qualification_amount=referral.qualification_amount + amount,
        )
        referral_code = await self.codes.get_by_id(referral.referral_code_id)
        if referral.qualification_amount >= referral_code.minimum_spend:
            referral = await self._qualify(referral, referral_code)
        return referral

    async def _qualify(self, referral: Referral, referral_code: ReferralCode) -> Referral:
        """Pay both parties once. A no-op unless the referral is pending."""
        if referral.status != ReferralStatus.PENDING:
            return referral

        now = utc_now()
        referral = await self.referrals.apply(
            referral,
            status=ReferralStatus.QUALIFIED,
            qualification_met=True,
            qualification_date=now,
        )

        await self.credits.grant(
            referral.referrer_id,
            referral_code.referrer_reward,
            TransactionType.REFERRAL_BONUS,
            f"Referral bonus for inviting {referral.referred_user_email}",
            related_entity_type="referral",
            related_entity_id=referral.id,
        )
        await self.credits.grant(
            referral.referred_user_id,
            referral_code.referred_reward,
            TransactionType.REFERRAL_BONUS,
            "Welcome bonus for joining with a referral code",
            related_entity_type="referral",
            related_entity_id=referral.id,
        )

        referral = await self.referrals.apply(
            referral,
            status=ReferralStatus.CREDITED,
            referrer_credits_awarded=referral_code.referrer_reward,
            referred_credits_awarded=referral_code.referred_reward,
            credited_at=now,
        )

        await self.notifications.notify(
            referral.referrer_id,
            NotificationType.CREDIT_AWARDED,
            "Referral bonus earned",
            f"You earned {referral_code.referrer_reward} credits for a successful referral.",
            related_entity_type="referral",
            related_entity_id=referral.id,
        )
        await self.notifications.notify(
            referral.referred_user_id,
            NotificationType.CREDIT_AWARDED,
            "Referral bonus received",
            f"You received {referral_code.referred_reward} credits for joining with a referral.",
            related_entity_type="referral",
            related_entity_id=referral.id,
        )
        self._log_operation("Referral credited", referral_id=referral.id)
        return referral
