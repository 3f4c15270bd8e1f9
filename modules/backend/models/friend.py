"""
Friendship Models.

A FriendRequest moves from pending to accepted or rejected. Accepting
one creates a Friendship row linking both users.
"""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, TimestampMixin, UUIDMixin
from modules.backend.models.enums import FriendRequestStatus


class FriendRequest(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "friend_requests"

    from_user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    to_user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), default=FriendRequestStatus.PENDING, nullable=False,
    )


class Friendship(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "friendships"
    __table_args__ = (UniqueConstraint("user1_id", "user2_id", name="uq_friendship_pair"),)

    user1_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    user2_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
