"""
Message Repository.
"""

from sqlalchemy import and_, or_, select

from modules.backend.models.message import Message
from modules.backend.repositories.base import BaseRepository


class MessageRepository(BaseRepository[Message]):
    model = Message

    async def list_conversation(self, user_id: str, other_id: str) -> list[Message]:
        """All messages between two users, oldest first."""
        result = await self.session.execute(
            select(Message)
            .where(
                or_(
                    and_(Message.sender_id == user_id, Message.receiver_id == other_id),
                    and_(Message.sender_id == other_id, Message.receiver_id == user_id),
                )
            )
            .order_by(Message.created_at.asc())
        )
        return list(result.scalars().all())

    async def list_involving(self, user_id: str) -> list[Message]:
        """Every message the user sent or received, newest first."""
        result = await self.session.execute(
            select(Message)
            .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .order_by(Message.created_at.desc())
        )
        return list(result.scalars().all())

    async def mark_received_read(self, receiver_id: str, sender_id: str) -> int:
        """Mark everything sender_id sent to receiver_id as read."""
        result = await self.session.execute(
            select(Message)
            .where(Message.receiver_id == receiver_id)
            .where(Message.sender_id == sender_id)
            .where(Message.is_read.is_(False))
        )
        unread = list(result.scalars().all())
        for message in unread:
            message.is_read = True
        await self.session.flush()
        return len(unread)
