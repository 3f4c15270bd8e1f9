"""
Festival Submission and Packet Schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.backend.models.enums import PacketStatus, SubmissionStatus
from modules.backend.schemas.base import reject_null


class FestivalSubmissionCreate(BaseModel):
    festival_name: str = Field(..., min_length=1, max_length=255)
    festival_url: str | None = Field(default=None, max_length=500)
    project_id: str | None = None
    script_id: str | None = None
    category: str | None = Field(default=None, max_length=100)
    submission_date: datetime | None = None
    deadline: datetime | None = None
    fee: int | None = Field(default=None, ge=0, description="Entry fee in cents")
    status: SubmissionStatus = SubmissionStatus.DRAFT
    notes: str | None = Field(default=None, max_length=5000)


class FestivalSubmissionUpdate(BaseModel):
    festival_name: str | None = Field(default=None, min_length=1, max_length=255)
    festival_url: str | None = Field(default=None, max_length=500)
    project_id: str | None = None
    script_id: str | None = None
    category: str | None = Field(default=None, max_length=100)
    submission_date: datetime | None = None
    deadline: datetime | None = None
    fee: int | None = Field(default=None, ge=0)
    status: SubmissionStatus | None = None
    notes: str | None = Field(default=None, max_length=5000)

    @field_validator("festival_name", "status", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class FestivalSubmissionResponse(BaseModel):
    id: str
    submitter_id: str
    festival_name: str
    festival_url: str | None
    project_id: str | None
    script_id: str | None
    category: str | None
    submission_date: datetime | None
    deadline: datetime | None
    fee: int | None
    status: str
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FestivalPacketCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, examples=["Night Watch - Sundance 2027"])
    festival_name: str = Field(..., min_length=1, max_length=255)
    project_id: str | None = None
    submission_deadline: datetime | None = None
    status: PacketStatus = PacketStatus.DRAFT
    requirements: dict[str, Any] | None = None
    submission_notes: str | None = Field(default=None, max_length=5000)


class FestivalPacketUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    festival_name: str | None = Field(default=None, min_length=1, max_length=255)
    project_id: str | None = None
    submission_deadline: datetime | None = None
    status: PacketStatus | None = None
    requirements: dict[str, Any] | None = None
    submission_notes: str | None = Field(default=None, max_length=5000)
    tracking_number: str | None = Field(default=None, max_length=100)

    @field_validator("title", "festival_name", "status", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class FestivalPacketResponse(BaseModel):
    id: str
    user_id: str
    project_id: str | None
    title: str
    festival_name: str
    submission_deadline: datetime | None
    status: str
    requirements: dict[str, Any] | None
    packaged_file_path: str | None
    submission_notes: str | None
    tracking_number: str | None
    submitted_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PacketExportRequest(BaseModel):
    template_id: str | None = Field(
        default=None, description="Export template to lay the package out with",
    )


class PacketExportResponse(BaseModel):
    """Where the packaged archive will be served from."""

    download_url: str
    filename: str
    template_id: str | None = None
    required_files: list[str] = Field(default_factory=list)
    created_at: datetime
