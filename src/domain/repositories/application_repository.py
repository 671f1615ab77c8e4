"""Application repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.application import Application, ApplicationStatus, ApplicationView


class IApplicationRepository(Protocol):
    """Repository interface for Application entities."""

    async def get(self, id: UUID) -> Application | None:
        """Get an application by ID."""
        ...

    async def get_pending(self, user_id: UUID, group_id: UUID) -> Application | None:
        """Get the pending application of a user for a group."""
        ...

    async def get_latest(self, user_id: UUID, group_id: UUID) -> Application | None:
        """Get the most recent application of a user for a group."""
        ...

    async def get_for_group(self, group_id: UUID) -> list[ApplicationView]:
        """Get all applications for a group joined with their applicants."""
        ...

    async def count_pending(self, group_id: UUID) -> int:
        """Count pending applications for a group."""
        ...

    async def create(self, application: Application) -> Application:
        """Create a new application."""
        ...

    async def update_status(
        self, id: UUID, status: ApplicationStatus
    ) -> Application | None:
        """Set the status of an application. Returns None if no row matched."""
        ...

    async def delete_for_group(self, group_id: UUID) -> int:
        """Delete every application of a group. Returns the deleted row count."""
        ...
