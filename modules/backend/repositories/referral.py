"""
Referral Repositories.
"""

from sqlalchemy import select

from modules.backend.models.referral import Referral, ReferralCode
from modules.backend.repositories.base import BaseRepository


class ReferralCodeRepository(BaseRepository[ReferralCode]):
    model = ReferralCode
    label = "Referral code"

    async def get_by_code(self, code: str) -> ReferralCode | None:
        result = await self.session.execute(
            select(ReferralCode).where(ReferralCode.code == code.strip().upper())
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> list[ReferralCode]:
        result = await self.session.execute(
            select(ReferralCode)
            .where(ReferralCode.user_id == user_id)
            .order_by(ReferralCode.created_at.desc())
        )
        return list(result.scalars().all())


class ReferralRepository(BaseRepository[Referral]):
    model = Referral

    async def get_by_referred_user(self, user_id: str) -> Referral | None:
        result = await self.session.execute(
            select(Referral).where(Referral.referred_user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_for_referrer(self, referrer_id: str) -> list[Referral]:
        result = await self.session.execute(
            select(Referral)
            .where(Referral.referrer_id == referrer_id)
            .order_by(Referral.created_at.desc())
        )
        return list(result.scalars().all())
