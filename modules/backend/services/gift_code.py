"""
Gift Code Service.

Admin-issued codes that grant credits. Redemption checks run in a fixed
order: the code exists, is active, has not expired, has uses left, and
has not been redeemed by this member before.
The code row is locked for the rest of the transaction, so concurrent
redemptions cannot push used_count past max_uses.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import ConflictError, NotFoundError, ValidationError
from modules.backend.core.utils import utc_now
from modules.backend.models.enums import TransactionType
from modules.backend.models.gift_code import GiftCode
from modules.backend.models.user import User
from modules.backend.repositories.gift_code import GiftCodeRedemptionRepository, GiftCodeRepository
from modules.backend.schemas.gift_code import GiftCodeCreate, GiftCodeUpdate
from modules.backend.services.base import BaseService
from modules.backend.services.credits import CreditService


class GiftCodeService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.codes = GiftCodeRepository(session)
        self.redemptions = GiftCodeRedemptionRepository(session)

    async def redeem(self, user: User, code: str) -> tuple[int, int]:
        """
        Returns:
            (credits received, new balance)

        Raises:
            NotFoundError: Unknown code
            ValidationError: Inactive, expired or fully used code
            ConflictError: Already redeemed by this member
        """
        gift_code = await self.codes.get_by_code_for_update(code)
        if gift_code is None:
            raise NotFoundError("Gift code not found")
        if not gift_code.is_active:
            raise ValidationError("Gift code is no longer active")
        if gift_code.expires_at and gift_code.expires_at < utc_now():
            raise ValidationError("Gift code has expired")
        if gift_code.used_count >= gift_code.max_uses:
            raise ValidationError("Gift code has reached its usage limit")
        if await self.redemptions.has_redeemed(gift_code.id, user.id):
            raise ConflictError("You have already redeemed this gift code")

        await self.redemptions.create(
            gift_code_id=gift_code.id,
            user_id=user.id,
            credits_received=gift_code.credits,
        )
        await self.codes.apply(gift_code, used_count=gift_code.used_count + 1)
        updated = await CreditService(self.session).grant(
            user.id,
            gift_code.credits,
            TransactionType.BONUS,
            f"Gift code {gift_code.code}",
            related_entity_type="gift_code",
            related_entity_id=gift_code.id,
        )
        self._log_operation("Gift code redeemed", user_id=user.id, code=gift_code.code)
        return gift_code.credits, updated.credits

    async def list_codes(self, limit: int = 100) -> list[GiftCode]:
        return await self.codes.get_all(limit=limit)

    async def create_code(self, admin: User, data: GiftCodeCreate) -> GiftCode:
        code = data.code.strip().upper()
        if await self.codes.get_by_code(code) is not None:
            raise ConflictError("Gift code already exists")
        gift_code = await self._execute_db_operation(
            "create_gift_code",
            self.codes.create(
                created_by_id=admin.id,
                **{**data.model_dump(), "code": code},
            ),
        )
        self._log_operation("Gift code created", code=code, credits=gift_code.credits)
        return gift_code

    async def update_code(self, code_id: str, data: GiftCodeUpdate) -> GiftCode:
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return await self.codes.get_by_id(code_id)
        return await self.codes.update(code_id, **update_data)

    async def deactivate_code(self, code_id: str) -> GiftCode:
        self._log_operation("Gift code deactivated", code_id=code_id)
        return await self.codes.update(code_id, is_active=False)
