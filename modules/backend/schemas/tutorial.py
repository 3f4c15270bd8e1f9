"""
Tutorial Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TutorialProgressUpdate(BaseModel):
    step: int = Field(..., ge=0, le=5)
    completed: bool = False


class TutorialStateResponse(BaseModel):
    tutorial_step: int
    has_completed_onboarding: bool
    has_received_welcome_package: bool
    tutorial_completed_at: datetime | None
    last_tutorial_interaction: datetime | None
    credits: int

    model_config = ConfigDict(from_attributes=True)


class TutorialCompleteResponse(TutorialStateResponse):
    credits_awarded: int
