"""
Report Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from modules.backend.models.enums import ReportStatus


class ReportCreate(BaseModel):
    """A report must name exactly one target."""

    reason: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    reported_user_id: str | None = None
    reported_post_id: str | None = None
    reported_reply_id: str | None = None

    @model_validator(mode="after")
    def one_target(self) -> "ReportCreate":
        targets = [self.reported_user_id, self.reported_post_id, self.reported_reply_id]
        if sum(t is not None for t in targets) != 1:
            raise ValueError("Exactly one of reported_user_id, reported_post_id or reported_reply_id is required")
        return self


class ReportStatusUpdate(BaseModel):
    status: ReportStatus


class ReportResponse(BaseModel):
    id: str
    reporter_id: str
    reported_user_id: str | None
    reported_post_id: str | None
    reported_reply_id: str | None
    reason: str
    description: str | None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
