"""
Referral Models.

A member's referral code, and each referral made with it. A referral
pays both parties once the referred member's purchases reach the
code's minimum spend.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, TimestampMixin, UUIDMixin
from modules.backend.models.enums import ReferralStatus


class ReferralCode(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "referral_codes"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    # Stored uppercase
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    referrer_reward: Mapped[int] = mapped_column(Integer, nullable=False)
    referred_reward: Mapped[int] = mapped_column(Integer, nullable=False)
    # Cents the referred member must spend
    minimum_spend: Mapped[int] = mapped_column(Integer, nullable=False)
    max_uses: Mapped[int] = mapped_column(Integer, nullable=False)
    current_uses: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime)


class Referral(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "referrals"

    referral_code_id: Mapped[str] = mapped_column(
        ForeignKey("referral_codes.id", ondelete="CASCADE"), nullable=False,
    )
    referrer_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    referred_user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False,
    )
    referred_user_email: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=ReferralStatus.PENDING, nullable=False,
    )
    qualification_met: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    qualification_amount: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    qualification_date: Mapped[datetime | None] = mapped_column(DateTime)
    referrer_credits_awarded: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    referred_credits_awarded: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    credited_at: Mapped[datetime | None] = mapped_column(DateTime)
