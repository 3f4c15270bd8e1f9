"""
Forum Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from modules.backend.schemas.user import UserSummary


class ForumCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    icon_class: str | None = Field(default=None, max_length=100)


class ForumCategoryResponse(BaseModel):
    id: str
    name: str
    description: str | None
    icon_class: str | None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ForumPostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1)


class ForumPostResponse(BaseModel):
    id: str
    title: str
    content: str
    author_id: str
    category_id: str
    is_sticky: bool
    is_locked: bool
    view_count: int
    reply_count: int
    created_at: datetime
    updated_at: datetime
    author: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class ForumReplyCreate(BaseModel):
    post_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    parent_reply_id: str | None = None


class ForumReplyResponse(BaseModel):
    id: str
    content: str
    author_id: str
    post_id: str
    parent_reply_id: str | None
    created_at: datetime
    author: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class ForumPostDetailResponse(ForumPostResponse):
    replies: list[ForumReplyResponse] = Field(default_factory=list)
