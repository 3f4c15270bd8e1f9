"""
Design Asset Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.backend.schemas.base import reject_null


class DesignAssetGenerate(BaseModel):
    """Generate an image with the AI provider and store it as an asset."""

    prompt: str = Field(..., min_length=1, max_length=4000)
    title: str = Field(..., min_length=1, max_length=255)
    asset_type: str = Field(..., min_length=1, max_length=50, examples=["poster", "storyboard"])
    category: str | None = Field(default=None, max_length=50)
    project_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    description: str | None = Field(default=None, max_length=5000)
    is_public: bool = False


class DesignAssetUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    category: str | None = Field(default=None, max_length=50)
    tags: list[str] | None = None
    is_public: bool | None = None
    project_id: str | None = None

    @field_validator("title", "tags", "is_public", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class DesignAssetResponse(BaseModel):
    id: str
    creator_id: str
    project_id: str | None
    title: str
    description: str | None
    asset_type: str
    category: str | None
    image_url: str | None
    prompt: str | None
    dimensions: str
    tags: list[str]
    is_public: bool
    download_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
