"""
User Model.

Members of the community, their military-verification status,
subscription state, credit balance and onboarding progress.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, TimestampMixin, UUIDMixin
from modules.backend.models.enums import SubscriptionStatus, UserRole


def _signup_credits() -> int:
    from modules.backend.core.config import get_app_config

    return get_app_config().credits.signup_credits


class User(UUIDMixin, TimestampMixin, Base):
    """A registered member."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    profile_image_url: Mapped[str | None] = mapped_column(String(500))
    location: Mapped[str | None] = mapped_column(String(255))
    bio: Mapped[str | None] = mapped_column(Text)
    specialties: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    role: Mapped[str] = mapped_column(String(20), default=UserRole.PUBLIC, nullable=False)
    relationship_type: Mapped[str | None] = mapped_column(String(32))
    military_branch: Mapped[str | None] = mapped_column(String(32))
    years_of_service: Mapped[int | None] = mapped_column(Integer)
    contact_email: Mapped[str | None] = mapped_column(String(255))
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    stripe_customer_id: Mapped[str | None] = mapped_column(String(255))
    stripe_subscription_id: Mapped[str | None] = mapped_column(String(255))
    subscription_status: Mapped[str] = mapped_column(
        String(20), default=SubscriptionStatus.NONE, nullable=False,
    )
    subscription_plan_id: Mapped[str | None] = mapped_column(String(50))
    subscription_expires_at: Mapped[datetime | None] = mapped_column(DateTime)

    credits: Mapped[int] = mapped_column(Integer, default=_signup_credits, nullable=False)
    total_credits_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    has_completed_onboarding: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_received_welcome_package: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False,
    )
    tutorial_step: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    tutorial_completed_at: Mapped[datetime | None] = mapped_column(DateTime)
    last_tutorial_interaction: Mapped[datetime | None] = mapped_column(DateTime)

    @property
    def display_name(self) -> str:
        name = " ".join(p for p in (self.first_name, self.last_name) if p)
        return name or self.email

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r}, role={self.role})>"
