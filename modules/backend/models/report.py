"""
Report Model.

Moderation reports against a user, a forum post or a forum reply.
"""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, TimestampMixin, UUIDMixin
from modules.backend.models.enums import ReportStatus


class Report(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "reports"

    reporter_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    reported_user_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
    )
    reported_post_id: Mapped[str | None] = mapped_column(
        ForeignKey("forum_posts.id", ondelete="CASCADE"),
    )
    reported_reply_id: Mapped[str | None] = mapped_column(
        ForeignKey("forum_replies.id", ondelete="CASCADE"),
    )
    reason: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), default=ReportStatus.PENDING, nullable=False)
