"""Pydantic schemas for Group API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.user import UserSummaryResponse


class GroupCreate(BaseModel):
    """Schema for creating a group."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=2000)
    sector: str | None = Field(None, max_length=100)
    visibility: str = Field("private", pattern="^(public|private)$")


class GroupUpdate(BaseModel):
    """Schema for updating a group."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=2000)
    sector: str | None = Field(None, max_length=100)
    visibility: str | None = Field(None, pattern="^(public|private)$")


class GroupResponse(BaseModel):
    """Schema for Group response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    visibility: str
    invite_code: str
    curator_id: UUID
    sector: str | None
    member_count: int = 0
    created_at: datetime
    updated_at: datetime


class GroupListResponse(BaseModel):
    """Schema for list of Groups response."""

    data: list[GroupResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class GroupDetailResponse(BaseModel):
    """Schema for single Group response."""

    data: GroupResponse


class MembershipResponse(BaseModel):
    """Schema for a membership with its user."""

    id: UUID
    user_id: UUID
    group_id: UUID
    role: str
    created_at: datetime
    user: UserSummaryResponse | None = None


class MembershipListResponse(BaseModel):
    """Schema for list of Memberships response."""

    data: list[MembershipResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
