"""Pydantic schemas for Deal and Document API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DealCreate(BaseModel):
    """Schema for creating a deal."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)


class DealUpdate(BaseModel):
    """Schema for updating a deal."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)


class DocumentResponse(BaseModel):
    """Schema for Document response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    filename: str
    file_size: int
    mime_type: str
    storage_path: str
    deal_id: UUID
    uploaded_by: UUID
    created_at: datetime


class DealResponse(BaseModel):
    """Schema for Deal response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    group_id: UUID
    created_by: UUID
    created_at: datetime
    updated_at: datetime
    documents: list[DocumentResponse] | None = None


class DealListResponse(BaseModel):
    """Schema for list of Deals response."""

    data: list[DealResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class DealDetailResponse(BaseModel):
    """Schema for single Deal response."""

    data: DealResponse


class DocumentListResponse(BaseModel):
    """Schema for list of Documents response."""

    data: list[DocumentResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class DocumentDetailResponse(BaseModel):
    """Schema for single Document response."""

    data: DocumentResponse


class DocumentUrlResponse(BaseModel):
    """Schema for a signed download URL."""

    url: str
    expires_in: int
