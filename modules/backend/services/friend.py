"""
Friend Service.

Friend requests and the friendships they create when accepted.
"""

from typing import Literal

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import ConflictError, ValidationError
from modules.backend.models.enums import ActivityType, FriendRequestStatus, NotificationType
from modules.backend.models.friend import FriendRequest
from modules.backend.models.user import User
from modules.backend.repositories.friend import FriendRequestRepository, FriendshipRepository
from modules.backend.repositories.user import UserRepository
from modules.backend.services.activity import ActivityService
from modules.backend.services.base import BaseService
from modules.backend.services.notification import NotificationService


class FriendService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.requests = FriendRequestRepository(session)
        self.friendships = FriendshipRepository(session)
        self.users = UserRepository(session)
        self.notifications = NotificationService(session)

    async def send_request(self, user: User, to_user_id: str) -> FriendRequest:
        """
        Raises:
            ValidationError: Request to self
            NotFoundError: Unknown recipient
            ConflictError: Already friends, or a request is already pending
        """
        if to_user_id == user.id:
            raise ValidationError("You cannot send a friend request to yourself")
        await self.users.get_by_id(to_user_id)

        if await self.friendships.are_friends(user.id, to_user_id):
            raise ConflictError("You are already friends")
        if await self.requests.get_pending_between(user.id, to_user_id) is not None:
            raise ConflictError("A friend request is already pending")

        request = await self.requests.create(from_user_id=user.id, to_user_id=to_user_id)
        await self.notifications.notify(
            to_user_id,
            NotificationType.FRIEND_REQUEST,
            "New friend request",
            f"{user.display_name} sent you a friend request.",
            action_url="/community",
            related_entity_type="friend_request",
            related_entity_id=request.id,
        )
        self._log_operation("Friend request sent", from_user_id=user.id, to_user_id=to_user_id)
        return request

    async def _with_other_party(
        self, requests: list[FriendRequest], other_field: str,
    ) -> list[tuple[FriendRequest, User | None]]:
        users = await self.users.get_many([getattr(r, other_field) for r in requests])
        return [(r, users.get(getattr(r, other_field))) for r in requests]

    async def sent_requests(self, user_id: str) -> list[tuple[FriendRequest, User | None]]:
        return await self._with_other_party(await self.requests.list_sent(user_id), "to_user_id")

    async def received_requests(self, user_id: str) -> list[tuple[FriendRequest, User | None]]:
        return await self._with_other_party(
            await self.requests.list_received(user_id), "from_user_id",
        )

    async def answer_request(
        self, user: User, request_id: str, status: Literal["accepted", "rejected"],
    ) -> FriendRequest:
        """
        Accept or reject a pending request addressed to the user.

        Raises:
            NotFoundError: Unknown request, or one addressed to someone else
            ConflictError: Request already answered
        """
        request = self._owned(
            await self.requests.get_by_id(request_id), user.id, "to_user_id", "Friend request",
        )
        if request.status != FriendRequestStatus.PENDING:
            raise ConflictError("Friend request has already been answered")

        request = await self.requests.apply(request, status=FriendRequestStatus(status))
        if request.status == FriendRequestStatus.ACCEPTED:
            await self.friendships.create(user1_id=request.from_user_id, user2_id=request.to_user_id)
            requester = await self.users.get_by_id(request.from_user_id)
            await ActivityService(self.session).record(
                user.id,
                ActivityType.FRIEND_ADDED,
                f"{user.display_name} and {requester.display_name} are now friends",
                metadata={"friend_id": requester.id},
            )
            await self.notifications.notify(
                requester.id,
                NotificationType.FRIEND_REQUEST,
                "Friend request accepted",
                f"{user.display_name} accepted your friend request.",
                related_entity_type="user",
                related_entity_id=user.id,
            )

        self._log_operation("Friend request answered", request_id=request.id, status=status)
        return request

    async def friends(self, user_id: str) -> list[User]:
        ids = await self.friendships.list_friend_ids(user_id)
        users = await self.users.get_many(ids)
        return [users[i] for i in ids if i in users]

    async def status_with(self, user_id: str, other_id: str) -> str:
        if await self.friendships.are_friends(user_id, other_id):
            return "friends"
        if await self.requests.get_pending_between(user_id, other_id) is not None:
            return "pending"
        return "none"
