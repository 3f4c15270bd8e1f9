"""
Export Template Schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.backend.models.enums import ExportTemplateType, PacketFileRole
from modules.backend.schemas.base import reject_null


class ExportTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Short film festival kit"])
    description: str | None = Field(default=None, max_length=5000)
    template_type: ExportTemplateType
    required_files: list[PacketFileRole] = Field(default_factory=list)
    optional_files: list[PacketFileRole] = Field(default_factory=list)
    file_structure: dict[str, Any] | None = None
    naming_convention: str | None = Field(
        default=None, max_length=255, examples=["{title}_{role}"],
    )
    is_public: bool = True


class ExportTemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    template_type: ExportTemplateType | None = None
    required_files: list[PacketFileRole] | None = None
    optional_files: list[PacketFileRole] | None = None
    file_structure: dict[str, Any] | None = None
    naming_convention: str | None = Field(default=None, max_length=255)
    is_public: bool | None = None

    @field_validator(
        "name", "template_type", "required_files", "optional_files", "is_public", mode="before",
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class ExportTemplateResponse(BaseModel):
    id: str
    name: str
    description: str | None
    template_type: str
    required_files: list[str]
    optional_files: list[str]
    file_structure: dict[str, Any] | None
    naming_convention: str | None
    is_public: bool
    created_by_id: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
