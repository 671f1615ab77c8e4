"""Application domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from domain.entities.user import UserSummary


class ApplicationStatus(StrEnum):
    """Status of a request to join a group.

    ``pending`` moves to ``approved`` or ``rejected``; both are terminal.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class Application:
    """Domain entity for a group application."""

    user_id: UUID
    group_id: UUID
    id: UUID = field(default_factory=uuid4)
    status: ApplicationStatus = ApplicationStatus.PENDING
    profile_link: str | None = None
    interest_statement: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_pending(self) -> bool:
        """Check if the application still awaits a decision."""
        return self.status == ApplicationStatus.PENDING

    def approve(self) -> None:
        """Mark the application as approved."""
        self.status = ApplicationStatus.APPROVED
        self.updated_at = datetime.utcnow()

    def reject(self) -> None:
        """Mark the application as rejected."""
        self.status = ApplicationStatus.REJECTED
        self.updated_at = datetime.utcnow()


@dataclass(frozen=True, slots=True)
class ApplicationView:
    """Read-only value object: an application joined with its applicant."""

    application: Application
    user: UserSummary | None
