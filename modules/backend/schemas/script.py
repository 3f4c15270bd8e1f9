"""
Script Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.backend.schemas.base import reject_null


class ScriptCreate(BaseModel):
    """Schema for creating a script. AI-generated content can be saved this way."""

    title: str = Field(..., max_length=255, description="Script title", examples=["Night Watch"])
    content: str | None = Field(default=None, description="Screenplay text")
    genre: str | None = Field(default=None, max_length=100)
    logline: str | None = Field(default=None, max_length=1000)
    festival_score: int | None = Field(default=None, ge=0, le=100)
    is_public: bool = False

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value.strip()


class ScriptUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    content: str | None = None
    genre: str | None = Field(default=None, max_length=100)
    logline: str | None = Field(default=None, max_length=1000)
    festival_score: int | None = Field(default=None, ge=0, le=100)
    is_public: bool | None = None

    @field_validator("title", "is_public", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("Title cannot be empty")
        return value.strip() if value is not None else None


class ScriptResponse(BaseModel):
    id: str = Field(description="Script unique identifier")
    title: str
    content: str | None
    genre: str | None
    logline: str | None
    festival_score: int | None
    is_public: bool
    author_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
