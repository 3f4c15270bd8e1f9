"""
Gift Code Models.

Admin-issued codes that grant credits, each redeemable once per user.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, TimestampMixin, UUIDMixin


class GiftCode(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "gift_codes"

    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    credits: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    max_uses: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    used_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime)
    created_by_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
    )


class GiftCodeRedemption(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "gift_code_redemptions"
    __table_args__ = (
        UniqueConstraint("gift_code_id", "user_id", name="uq_gift_code_redemption"),
    )

    gift_code_id: Mapped[str] = mapped_column(
        ForeignKey("gift_codes.id", ondelete="CASCADE"), nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    credits_received: Mapped[int] = mapped_column(Integer, nullable=False)
