"""Deal repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.deal import Deal, Document


class IDealRepository(Protocol):
    """Repository interface for Deal and Document entities."""

    async def get(self, id: UUID) -> Deal | None:
        """Get a deal by ID."""
        ...

    async def get_for_group(self, group_id: UUID) -> list[Deal]:
        """Get all deals of a group."""
        ...

    async def create(self, deal: Deal) -> Deal:
        """Create a new deal."""
        ...

    async def update(self, deal: Deal) -> Deal:
        """Update an existing deal."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a deal."""
        ...

    async def get_document(self, id: UUID) -> Document | None:
        """Get a document by ID."""
        ...

    async def get_documents(self, deal_id: UUID) -> list[Document]:
        """Get all documents of a deal."""
        ...

    async def add_document(self, document: Document) -> Document:
        """Insert a document row."""
        ...

    async def delete_document(self, id: UUID) -> bool:
        """Delete a document row."""
        ...

    async def delete_documents_for_deal(self, deal_id: UUID) -> int:
        """Delete every document row of a deal. Returns the deleted row count."""
        ...
