"""Group and membership domain entities."""

import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from domain.entities.user import UserSummary

INVITE_CODE_LENGTH = 8
INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits


class GroupVisibility(StrEnum):
    """Whether a group is listed on the browse page."""

    PUBLIC = "public"
    PRIVATE = "private"


class MembershipRole(StrEnum):
    """Standing of a user inside one group."""

    CURATOR = "curator"
    MEMBER = "member"
    NONE = "none"


def generate_invite_code() -> str:
    """Generate a random 8-character alphanumeric invite code."""
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))


def can_manage_members(role: MembershipRole) -> bool:
    """Approve/reject applications and remove members."""
    return role == MembershipRole.CURATOR


def can_access_group(role: MembershipRole) -> bool:
    """See deals, documents and comments of the group."""
    return role != MembershipRole.NONE


@dataclass
class Group:
    """Domain entity for a curated investment group."""

    name: str
    curator_id: UUID
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    visibility: GroupVisibility = GroupVisibility.PRIVATE
    invite_code: str = field(default_factory=generate_invite_code)
    sector: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass
class Membership:
    """Domain entity for a group membership.

    A user holds at most one membership per group. ``role`` is never
    ``MembershipRole.NONE``; that value only describes the absence of a row.
    """

    user_id: UUID
    group_id: UUID
    role: MembershipRole = MembershipRole.MEMBER
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True, slots=True)
class MemberView:
    """Read-only value object: a membership joined with its user."""

    membership: Membership
    user: UserSummary | None


@dataclass(frozen=True, slots=True)
class GroupView:
    """Read-only value object: a group with its member count."""

    group: Group
    member_count: int
