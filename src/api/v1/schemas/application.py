"""Pydantic schemas for Application API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from api.v1.schemas.user import UserSummaryResponse


class ApplicationCreate(BaseModel):
    """Schema for applying to a group."""

    profile_link: str | None = Field(None, max_length=500)
    interest_statement: str | None = Field(None, max_length=5000)


class ApplicationResponse(BaseModel):
    """Schema for Application response."""

    id: UUID
    user_id: UUID
    group_id: UUID
    status: str
    profile_link: str | None
    interest_statement: str | None
    created_at: datetime
    updated_at: datetime
    user: UserSummaryResponse | None = None


class ApplicationDetailResponse(BaseModel):
    """Schema for single Application response (``data`` is null when none exists)."""

    data: ApplicationResponse | None


class ApplicationListResponse(BaseModel):
    """Schema for list of Applications response."""

    data: list[ApplicationResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class PendingCountResponse(BaseModel):
    """Schema for the pending applications badge."""

    count: int
