"""
Message Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from modules.backend.schemas.user import UserSummary


class MessageCreate(BaseModel):
    receiver_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=10000)


class MessageResponse(BaseModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConversationResponse(BaseModel):
    """Latest message exchanged with one partner."""

    partner: UserSummary
    last_message: MessageResponse
    unread_count: int
