"""
Friend Schemas.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from modules.backend.schemas.user import UserSummary


class FriendRequestCreate(BaseModel):
    to_user_id: str = Field(..., min_length=1)


class FriendRequestAnswer(BaseModel):
    status: Literal["accepted", "rejected"]


class FriendRequestResponse(BaseModel):
    id: str
    from_user_id: str
    to_user_id: str
    status: str
    created_at: datetime
    user: UserSummary | None = Field(
        default=None,
        description="The other party: recipient for sent, sender for received",
    )

    model_config = ConfigDict(from_attributes=True)


class FriendshipStatusResponse(BaseModel):
    status: Literal["none", "pending", "friends"]
