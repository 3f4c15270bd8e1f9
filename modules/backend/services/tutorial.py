"""
Tutorial Service.

Onboarding progress and the one-time welcome package.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.utils import utc_now
from modules.backend.models.enums import NotificationType, TransactionType
from modules.backend.models.user import User
from modules.backend.repositories.user import UserRepository
from modules.backend.services.base import BaseService
from modules.backend.services.credits import CreditService
from modules.backend.services.notification import NotificationService

FINAL_STEP = 5


class TutorialService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.users = UserRepository(session)

    async def update_progress(self, user: User, step: int, completed: bool = False) -> User:
        now = utc_now()
        changes: dict = {"tutorial_step": step, "last_tutorial_interaction": now}
        if completed:
            changes["has_completed_onboarding"] = True
            changes["tutorial_completed_at"] = now
        return await self.users.apply(user, **changes)

    async def complete(self, user: User) -> tuple[User, int]:
        """
        Finish onboarding. The welcome credits are granted only once.

        Returns:
            (user, credits awarded by this call)
        """
        user = await self.users.get_for_update(user.id)
        awarded = 0
        if not user.has_received_welcome_package:
            awarded = get_app_config().credits.welcome_package_credits
            await CreditService(self.session).grant(
                user.id,
                awarded,
                TransactionType.BONUS,
                "Welcome package for completing the tutorial",
            )
            await NotificationService(self.session).notify(
                user.id,
                NotificationType.SYSTEM_ALERT,
                "Welcome aboard!",
                f"You completed the tutorial and received {awarded} bonus credits.",
            )
            self._log_operation("Welcome package awarded", user_id=user.id, credits=awarded)

        now = utc_now()
        user = await self.users.apply(
            user,
            tutorial_step=FINAL_STEP,
            has_completed_onboarding=True,
            has_received_welcome_package=True,
            tutorial_completed_at=user.tutorial_completed_at or now,
            last_tutorial_interaction=now,
        )
        return user, awarded
