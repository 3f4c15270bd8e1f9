"""
Achievement and Tier Models.

Achievements unlock when a requirement {type, amount} is met. Spending
tiers band members by the total credits they have spent.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.core.utils import utc_now
from modules.backend.models.base import Base, TimestampMixin, UUIDMixin


class Achievement(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "achievements"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    badge_icon: Mapped[str] = mapped_column(String(50), nullable=False)
    badge_color: Mapped[str] = mapped_column(String(20), nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    requirement: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class UserAchievement(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "user_achievements"
    __table_args__ = (UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),)

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    achievement_id: Mapped[str] = mapped_column(
        ForeignKey("achievements.id", ondelete="CASCADE"), nullable=False,
    )
    unlocked_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)
    progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class SpendingTier(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "spending_tiers"

    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    min_spend: Mapped[int] = mapped_column(Integer, nullable=False)
    # Null for the top tier
    max_spend: Mapped[int | None] = mapped_column(Integer)
    badge_icon: Mapped[str | None] = mapped_column(String(50))
    badge_color: Mapped[str | None] = mapped_column(String(20))
    benefits: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class UserSpending(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "user_spending"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False,
    )
    total_credits_spent: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    current_tier_id: Mapped[str | None] = mapped_column(
        ForeignKey("spending_tiers.id", ondelete="SET NULL"),
    )
    last_tier_update: Mapped[datetime | None] = mapped_column(DateTime)
