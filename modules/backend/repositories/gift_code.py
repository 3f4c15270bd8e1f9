"""
Gift Code Repositories.
"""

from sqlalchemy import select

from modules.backend.models.gift_code import GiftCode, GiftCodeRedemption
from modules.backend.repositories.base import BaseRepository


class GiftCodeRepository(BaseRepository[GiftCode]):
    model = GiftCode
    label = "Gift code"

    async def get_by_code(self, code: str) -> GiftCode | None:
        result = await self.session.execute(
            select(GiftCode).where(GiftCode.code == code.strip().upper())
        )
        return result.scalar_one_or_none()

    async def get_by_code_for_update(self, code: str) -> GiftCode | None:
        """Load a code with a row lock (no-op on SQLite) so concurrent redemptions see fresh counts."""
        result = await self.session.execute(
            select(GiftCode)
            .where(GiftCode.code == code.strip().upper())
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


class GiftCodeRedemptionRepository(BaseRepository[GiftCodeRedemption]):
    model = GiftCodeRedemption

    async def has_redeemed(self, gift_code_id: str, user_id: str) -> bool:
        result = await self.session.execute(
            select(GiftCodeRedemption.id)
            .where(GiftCodeRedemption.gift_code_id == gift_code_id)
            .where(GiftCodeRedemption.user_id == user_id)
        )
        return result.scalars().first() is not None
