"""
User and Auth Schemas.

Pydantic schemas for registration, login, tokens and member profiles.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.backend.models.enums import MilitaryBranch, RelationshipType
from modules.backend.schemas.base import reject_null

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserRegister(BaseModel):
    """Schema for creating an account."""

    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255, examples=["jane@example.com"])
    password: str = Field(..., min_length=8, max_length=128, description="Plain-text password")
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    referral_code: str | None = Field(
        default=None,
        max_length=50,
        description="Optional referral code from an existing member",
    )


class UserLogin(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class TokenRefresh(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Access and refresh tokens issued at login."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """The caller's own profile, including billing and onboarding state."""

    id: str = Field(description="User unique identifier")
    email: str
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None
    location: str | None
    bio: str | None
    specialties: list[str]
    role: str = Field(description="public, pending or verified")
    relationship_type: str | None
    military_branch: str | None
    years_of_service: int | None
    contact_email: str | None
    is_verified: bool
    subscription_status: str
    subscription_plan_id: str | None
    subscription_expires_at: datetime | None
    credits: int
    total_credits_used: int
    has_completed_onboarding: bool
    has_received_welcome_package: bool
    tutorial_step: int
    tutorial_completed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MemberResponse(BaseModel):
    """Another member's public profile."""

    id: str
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None
    location: str | None
    bio: str | None
    specialties: list[str]
    role: str
    relationship_type: str | None
    military_branch: str | None
    years_of_service: int | None
    is_verified: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """Minimal author/creator reference embedded in other resources."""

    id: str
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None

    model_config = ConfigDict(from_attributes=True)


class RoleUpdate(BaseModel):
    role: Literal["public", "pending", "verified"]


class VerificationRequest(BaseModel):
    """Military-status verification request."""

    relationship_type: RelationshipType
    military_branch: MilitaryBranch | None = None
    years_of_service: int | None = Field(default=None, ge=0, le=80)
    contact_email: str | None = Field(default=None, pattern=EMAIL_PATTERN, max_length=255)
    bio: str | None = Field(default=None, max_length=5000)


class ProfileUpdate(BaseModel):
    """Only provided fields are updated."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    location: str | None = Field(default=None, max_length=255)
    bio: str | None = Field(default=None, max_length=5000)
    specialties: list[str] | None = None
    profile_image_url: str | None = Field(default=None, max_length=500)

    @field_validator("specialties", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)
