"""
Message Service.

Direct messages between members.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import ValidationError
from modules.backend.models.enums import NotificationType
from modules.backend.models.message import Message
from modules.backend.models.user import User
from modules.backend.repositories.message import MessageRepository
from modules.backend.repositories.user import UserRepository
from modules.backend.services.base import BaseService
from modules.backend.services.notification import NotificationService

PREVIEW_LENGTH = 80


@dataclass
class Conversation:
    partner: User
    last_message: Message
    unread_count: int


class MessageService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = MessageRepository(session)
        self.users = UserRepository(session)

    async def send(self, user: User, receiver_id: str, content: str) -> Message:
        """
        Raises:
            ValidationError: Message to self
            NotFoundError: Unknown receiver
        """
        if receiver_id == user.id:
            raise ValidationError("You cannot message yourself")
        await self.users.get_by_id(receiver_id)

        message = await self._execute_db_operation(
            "send_message",
            self.repo.create(sender_id=user.id, receiver_id=receiver_id, content=content),
        )
        preview = content if len(content) <= PREVIEW_LENGTH else content[:PREVIEW_LENGTH] + "..."
        await NotificationService(self.session).notify(
            receiver_id,
            NotificationType.MESSAGE_RECEIVED,
            f"New message from {user.display_name}",
            preview,
            action_url=f"/messages/{user.id}",
            related_entity_type="message",
            related_entity_id=message.id,
        )
        self._log_debug("Message sent", sender_id=user.id, receiver_id=receiver_id)
        return message

    async def conversations(self, user_id: str) -> list[Conversation]:
        """Latest message per partner, newest conversation first."""
        latest: dict[str, Message] = {}
        unread: dict[str, int] = {}
        for message in await self.repo.list_involving(user_id):
            partner_id = message.receiver_id if message.sender_id == user_id else message.sender_id
            latest.setdefault(partner_id, message)
            if message.receiver_id == user_id and not message.is_read:
                unread[partner_id] = unread.get(partner_id, 0) + 1

        partners = await self.users.get_many(list(latest))
        return [
            Conversation(partners[pid], message, unread.get(pid, 0))
            for pid, message in latest.items()
            if pid in partners
        ]

    async def conversation_with(self, user_id: str, other_id: str) -> list[Message]:
        """The full thread, oldest first. Marks the caller's received messages read."""
        await self.users.get_by_id(other_id)
        await self.repo.mark_received_read(user_id, other_id)
        return await self.repo.list_conversation(user_id, other_id)

    async def mark_read(self, user_id: str, message_id: str) -> Message:
        message = self._owned(await self.repo.get_by_id(message_id), user_id, "receiver_id", "Message")
        if message.is_read:
            return message
        return await self.repo.apply(message, is_read=True)
