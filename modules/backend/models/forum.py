"""
Forum Models.

Categories hold posts; posts hold (optionally threaded) replies.
"""

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, TimestampMixin, UUIDMixin


class ForumCategory(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "forum_categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    icon_class: Mapped[str | None] = mapped_column(String(100))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class ForumPost(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "forum_posts"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    category_id: Mapped[str] = mapped_column(
        ForeignKey("forum_categories.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    is_sticky: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    reply_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class ForumReply(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "forum_replies"

    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    post_id: Mapped[str] = mapped_column(
        ForeignKey("forum_posts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    parent_reply_id: Mapped[str | None] = mapped_column(
        ForeignKey("forum_replies.id", ondelete="CASCADE"),
    )
