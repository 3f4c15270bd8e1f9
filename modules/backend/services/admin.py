"""
Admin Service.

Community statistics, manual credit awards, military-service
verification and the monthly veteran credit run.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import ConflictError
from modules.backend.core.utils import month_key, utc_now
from modules.backend.models.billing import CreditTransaction
from modules.backend.models.enums import NotificationType, TransactionType, UserRole
from modules.backend.models.user import User
from modules.backend.repositories.billing import (
    CreditTransactionRepository,
    MonthlyVeteranCreditRepository,
)
from modules.backend.repositories.project import ProjectRepository
from modules.backend.repositories.script import ScriptRepository
from modules.backend.repositories.user import UserRepository
from modules.backend.schemas.admin import ServiceVerification
from modules.backend.services.base import BaseService
from modules.backend.services.credits import CreditService
from modules.backend.services.notification import NotificationService


class AdminService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.users = UserRepository(session)
        self.transactions = CreditTransactionRepository(session)
        self.monthly_runs = MonthlyVeteranCreditRepository(session)
        self.credits = CreditService(session)

    async def list_users(self, limit: int = 100, offset: int = 0) -> tuple[list[User], int]:
        return await self.users.get_all(limit=limit, offset=offset), await self.users.count()

    async def stats(self) -> dict[str, int]:
        return {
            "total_users": await self.users.count(),
            "verified_veterans": await self.users.count_verified_veterans(),
            "total_scripts": await ScriptRepository(self.session).count(),
            "total_projects": await ProjectRepository(self.session).count(),
            "credits_awarded": await self.transactions.sum_amounts(),
        }

    async def award_credits(self, admin: User, user_id: str, amount: int, reason: str) -> User:
        user = await self.credits.grant(
            user_id,
            amount,
            TransactionType.ADMIN_AWARD,
            reason,
            awarded_by=admin.id,
        )
        await NotificationService(self.session).notify(
            user_id,
            NotificationType.CREDIT_AWARDED,
            "Credits awarded",
            f"You were awarded {amount} credits: {reason}",
        )
        self._log_operation("Admin credit award", admin_id=admin.id, user_id=user_id, amount=amount)
        return user

    async def verify_service(self, admin: User, data: ServiceVerification) -> User:
        """Record a member's service details and approve or hold their verification."""
        user = await self.users.get_by_id(data.user_id)
        user = await self.users.apply(
            user,
            relationship_type=data.service_type,
            military_branch=data.branch,
            years_of_service=data.years_served,
            is_verified=data.verified,
            role=UserRole.VERIFIED if data.verified else UserRole.PENDING,
        )

        if data.verified:
            title, message = "Verification approved", "Your military service has been verified. Welcome to the unit."
        else:
            title, message = "Verification update", "Your verification is still under review."
        await NotificationService(self.session).notify(
            user.id, NotificationType.SYSTEM_ALERT, title, message,
        )
        self._log_operation(
            "Service verification recorded",
            admin_id=admin.id,
            user_id=user.id,
            verified=data.verified,
        )
        return user

    async def process_monthly_credits(self, admin_id: str | None = None) -> dict:
        """
        Give every verified veteran and active-duty member the monthly gift.

        Runs at most once per calendar month.

        Raises:
            ConflictError: Already processed this month
        """
        now = utc_now()
        month = month_key(now)
        if await self.monthly_runs.get_for_month(month) is not None:
            raise ConflictError(f"Monthly veteran credits already processed for {month}")

        amount = get_app_config().credits.monthly_veteran_credits
        recipients = await self.users.list_monthly_credit_recipients()
        for user in recipients:
            await self.credits.grant(
                user.id,
                amount,
                TransactionType.MONTHLY_VETERAN_GIFT,
                f"Monthly veteran credits for {month}",
                awarded_by=admin_id,
            )
            await NotificationService(self.session).notify(
                user.id,
                NotificationType.CREDIT_AWARDED,
                "Monthly veteran credits",
                f"Thank you for your service. {amount} credits have been added to your account.",
            )

        total = amount * len(recipients)
        await self.monthly_runs.create(
            month=month,
            year=now.year,
            veterans_processed=len(recipients),
            credits_awarded=total,
            processed_by=admin_id,
        )
        self._log_operation("Monthly veteran credits processed", month=month, veterans=len(recipients))
        return {"veterans_awarded": len(recipients), "total_credits": total, "month": month}

    async def recent_transactions(self, limit: int = 100) -> list[tuple[CreditTransaction, User]]:
        return await self.transactions.list_recent_with_users(limit=limit)

    async def verification_requests(self) -> list[User]:
        return await self.users.list_pending_verification()
