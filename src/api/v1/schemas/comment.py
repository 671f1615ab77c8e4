"""Pydantic schemas for Comment API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from api.v1.schemas.user import UserSummaryResponse


class CommentCreate(BaseModel):
    """Schema for posting a comment or reply."""

    content: str = Field(..., min_length=1, max_length=10000)
    visibility: str = Field("public", pattern="^(public|private)$")
    parent_id: UUID | None = None


class CommentUpdate(BaseModel):
    """Schema for editing a comment. Omitted fields stay unchanged."""

    content: str | None = Field(None, min_length=1, max_length=10000)
    visibility: str | None = Field(None, pattern="^(public|private)$")


class CommentResponse(BaseModel):
    """Schema for Comment response. ``replies`` is filled in thread listings."""

    id: UUID
    content: str
    user_id: UUID
    deal_id: UUID
    parent_id: UUID | None
    visibility: str
    resolved: bool
    created_at: datetime
    updated_at: datetime
    user: UserSummaryResponse | None = None
    replies: list["CommentResponse"] = Field(default_factory=list)


class CommentListResponse(BaseModel):
    """Schema for a deal's comment threads."""

    data: list[CommentResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class CommentDetailResponse(BaseModel):
    """Schema for single Comment response."""

    data: CommentResponse
