"""
User Repository.

Data access for members, including the admin and scheduled-job queries.
"""

from datetime import datetime

from sqlalchemy import func, or_, select

from modules.backend.core.exceptions import NotFoundError
from modules.backend.models.enums import RelationshipType, SubscriptionStatus, UserRole
from modules.backend.models.user import User
from modules.backend.repositories.base import BaseRepository

# Relationships that receive the monthly veteran gift
VETERAN_RELATIONSHIPS = (RelationshipType.VETERAN, RelationshipType.ACTIVE_DUTY)


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, user_id: str) -> User:
        """Load a user with a row lock (no-op on SQLite) and fresh values."""
        result = await self.session.execute(
            select(User)
            .where(User.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_verified_members(self, search: str | None, limit: int) -> list[User]:
        """Verified members, most recently joined first, optionally filtered."""
        query = select(User).where(User.role == UserRole.VERIFIED)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.where(
                or_(
                    func.lower(User.first_name).like(pattern),
                    func.lower(User.last_name).like(pattern),
                    func.lower(User.email).like(pattern),
                )
            )
        result = await self.session.execute(
            query.order_by(User.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def get_many(self, user_ids: list[str]) -> dict[str, User]:
        """Load several users at once, keyed by id."""
        if not user_ids:
            return {}
        result = await self.session.execute(select(User).where(User.id.in_(set(user_ids))))
        return {user.id: user for user in result.scalars().all()}

    async def count_verified_veterans(self) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(User)
            .where(User.is_verified.is_(True))
            .where(User.relationship_type.in_(VETERAN_RELATIONSHIPS))
        )
        return result.scalar_one()

    async def list_pending_verification(self) -> list[User]:
        result = await self.session.execute(
            select(User)
            .where(User.role == UserRole.PENDING)
            .where(User.is_verified.is_(False))
            .order_by(User.updated_at.desc())
        )
        return list(result.scalars().all())

    async def list_monthly_credit_recipients(self) -> list[User]:
        """Verified members who served or are serving."""
        result = await self.session.execute(
            select(User)
            .where(User.role == UserRole.VERIFIED)
            .where(User.is_verified.is_(True))
            .where(User.relationship_type.in_(VETERAN_RELATIONSHIPS))
        )
        return list(result.scalars().all())

    async def list_lapsed_subscriptions(self, now: datetime) -> list[User]:
        """Active subscriptions whose expiry has passed."""
        result = await self.session.execute(
            select(User)
            .where(User.subscription_status == SubscriptionStatus.ACTIVE)
            .where(User.subscription_expires_at.is_not(None))
            .where(User.subscription_expires_at < now)
        )
        return list(result.scalars().all())

    async def list_ids(self) -> list[str]:
        result = await self.session.execute(select(User.id))
        return list(result.scalars().all())
