"""Pydantic schemas for User API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserSummaryResponse(BaseModel):
    """Author / applicant / member shown next to content."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None
    email: str | None


class UserResponse(BaseModel):
    """Schema for the signed-in user's profile."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    external_ref: str
    name: str | None
    email: str | None
    role: str | None
    profile_link: str | None
    bio: str | None
    is_onboarded: bool
    created_at: datetime
    updated_at: datetime


class UserDetailResponse(BaseModel):
    """Schema for single User response."""

    data: UserResponse


class UserUpdate(BaseModel):
    """Schema for editing the profile."""

    name: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=255)
    profile_link: str | None = Field(None, max_length=500)
    bio: str | None = Field(None, max_length=2000)


class RoleUpdate(BaseModel):
    """Schema for choosing the platform role during onboarding."""

    role: str = Field(..., description="curator or investor")
