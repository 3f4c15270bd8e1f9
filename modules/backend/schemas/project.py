"""
Project Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from modules.backend.models.enums import ProjectStatus, ProjectType
from modules.backend.schemas.user import UserSummary


class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    type: ProjectType
    status: ProjectStatus = ProjectStatus.PRE_PRODUCTION
    seeking_roles: list[str] = Field(default_factory=list)
    is_public: bool = True


class ProjectResponse(BaseModel):
    id: str
    title: str
    description: str | None
    type: str
    status: str
    seeking_roles: list[str]
    is_public: bool
    creator_id: str
    created_at: datetime
    updated_at: datetime
    creator: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class CollaboratorResponse(BaseModel):
    id: str
    project_id: str
    user_id: str
    role: str | None
    permissions: str
    created_at: datetime
    user: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class ProjectDetailResponse(ProjectResponse):
    collaborators: list[CollaboratorResponse] = Field(default_factory=list)


class ProjectJoin(BaseModel):
    role: str | None = Field(default=None, max_length=100, description="Role the member wants")
