"""
Friendship Repositories.
"""

from sqlalchemy import and_, func, or_, select

from modules.backend.models.enums import FriendRequestStatus
from modules.backend.models.friend import FriendRequest, Friendship
from modules.backend.repositories.base import BaseRepository


class FriendRequestRepository(BaseRepository[FriendRequest]):
    model = FriendRequest
    label = "Friend request"

    async def get_pending_between(self, from_user_id: str, to_user_id: str) -> FriendRequest | None:
        """Pending request in either direction between two users."""
        result = await self.session.execute(
            select(FriendRequest)
            .where(FriendRequest.status == FriendRequestStatus.PENDING)
            .where(
                or_(
                    and_(
                        FriendRequest.from_user_id == from_user_id,
                        FriendRequest.to_user_id == to_user_id,
                    ),
                    and_(
                        FriendRequest.from_user_id == to_user_id,
                        FriendRequest.to_user_id == from_user_id,
                    ),
                )
            )
        )
        return result.scalars().first()

    async def list_sent(self, user_id: str) -> list[FriendRequest]:
        result = await self.session.execute(
            select(FriendRequest)
            .where(FriendRequest.from_user_id == user_id)
            .where(FriendRequest.status == FriendRequestStatus.PENDING)
            .order_by(FriendRequest.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_received(self, user_id: str) -> list[FriendRequest]:
        result = await self.session.execute(
            select(FriendRequest)
            .where(FriendRequest.to_user_id == user_id)
            .where(FriendRequest.status == FriendRequestStatus.PENDING)
            .order_by(FriendRequest.created_at.desc())
        )
        return list(result.scalars().all())


class FriendshipRepository(BaseRepository[Friendship]):
    model = Friendship

    async def are_friends(self, user_a: str, user_b: str) -> bool:
        result = await self.session.execute(
            select(Friendship.id).where(
                or_(
                    and_(Friendship.user1_id == user_a, Friendship.user2_id == user_b),
                    and_(Friendship.user1_id == user_b, Friendship.user2_id == user_a),
                )
            )
        )
        return result.scalars().first() is not None

    async def list_friend_ids(self, user_id: str) -> list[str]:
        result = await self.session.execute(
            select(Friendship).where(
                or_(Friendship.user1_id == user_id, Friendship.user2_id == user_id)
            )
        )
        return [
            f.user2_id if f.user1_id == user_id else f.user1_id
            for f in result.scalars().all()
        ]

    async def count_for_user(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Friendship)
            .where(or_(Friendship.user1_id == user_id, Friendship.user2_id == user_id))
        )
        return result.scalar_one()
