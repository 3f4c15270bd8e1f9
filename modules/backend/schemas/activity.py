"""
Activity Schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from modules.backend.schemas.user import UserSummary


class ActivityResponse(BaseModel):
    id: str
    user_id: str
    type: str
    description: str
    metadata: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("metadata_", "metadata"),
    )
    created_at: datetime
    user: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)
