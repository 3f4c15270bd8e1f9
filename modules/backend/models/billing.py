"""
Billing Models.

Subscription plans, the signed credit ledger, and the record of monthly
veteran credit runs.
"""

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, TimestampMixin, UUIDMixin


class SubscriptionPlan(TimestampMixin, Base):
    """A purchasable plan. The primary key is a slug such as "monthly"."""

    __tablename__ = "subscription_plans"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    # Price in cents
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    interval: Mapped[str] = mapped_column(String(10), nullable=False)
    credits_included: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    military_discount: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    stripe_price_id: Mapped[str | None] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    features: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)


class CreditTransaction(UUIDMixin, TimestampMixin, Base):
    """One signed movement of a user's credit balance."""

    __tablename__ = "credit_transactions"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    related_entity_type: Mapped[str | None] = mapped_column(String(50))
    related_entity_id: Mapped[str | None] = mapped_column(String(255))
    stripe_payment_intent_id: Mapped[str | None] = mapped_column(String(255), index=True)
    awarded_by: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
    )


class MonthlyVeteranCredit(UUIDMixin, TimestampMixin, Base):
    """Marks that the monthly veteran gift ran for a given month."""

    __tablename__ = "monthly_veteran_credits"
    __table_args__ = (UniqueConstraint("month", "year", name="uq_monthly_veteran_credit"),)

    # "YYYY-MM"
    month: Mapped[str] = mapped_column(String(7), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    veterans_processed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    credits_awarded: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    processed_by: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
    )
    notes: Mapped[str | None] = mapped_column(Text)
