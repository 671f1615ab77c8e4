"""User domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class PlatformRole(StrEnum):
    """Platform-wide role chosen during onboarding.

    Distinct from ``MembershipRole``: this says what kind of participant the
    person is, not what standing they hold inside a particular group.
    """

    CURATOR = "curator"
    INVESTOR = "investor"


@dataclass
class User:
    """Domain entity for a platform user (created on first sign-in)."""

    external_ref: str
    id: UUID = field(default_factory=uuid4)
    name: str | None = None
    email: str | None = None
    role: PlatformRole | None = None
    profile_link: str | None = None
    bio: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def is_onboarded(self) -> bool:
        """Whether the user has chosen a platform role."""
        return self.role is not None


@dataclass(frozen=True, slots=True)
class UserSummary:
    """Read-only value object: the public face of a user shown next to content."""

    id: UUID
    name: str | None
    email: str | None
