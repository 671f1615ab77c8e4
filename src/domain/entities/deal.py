"""Deal and document domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


def storage_path_for(group_id: UUID, deal_id: UUID, filename: str) -> str:
    """Object storage key for a deal document: ``{group_id}/{deal_id}/{filename}``."""
    return f"{group_id}/{deal_id}/{filename}"


@dataclass
class Deal:
    """Domain entity for a deal folder inside a group."""

    name: str
    group_id: UUID
    created_by: UUID
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Document:
    """Domain entity for a file stored under a deal.

    Only the storage path is persisted; the binary lives in object storage.
    """

    filename: str
    file_size: int
    mime_type: str
    storage_path: str
    deal_id: UUID
    uploaded_by: UUID
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True, slots=True)
class DealView:
    """Read-only value object: a deal with its documents."""

    deal: Deal
    documents: list[Document]
