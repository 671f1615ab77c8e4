"""Group repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.group import Group, Membership, MemberView


class IGroupRepository(Protocol):
    """Repository interface for Group and Membership entities."""

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        ...

    async def get_by_invite_code(self, invite_code: str) -> Group | None:
        """Get a group by its invite code."""
        ...

    async def get_public(self) -> list[Group]:
        """Get all public groups, newest first."""
        ...

    async def get_for_user(self, user_id: UUID) -> list[Group]:
        """Get all groups the user holds a membership in."""
        ...

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        ...

    async def update(self, group: Group) -> Group:
        """Update an existing group."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a group."""
        ...

    async def get_membership(self, user_id: UUID, group_id: UUID) -> Membership | None:
        """Get the membership of a user in a group."""
        ...

    async def get_members(self, group_id: UUID) -> list[MemberView]:
        """Get all memberships of a group joined with their users."""
        ...

    async def get_memberships_for_user(self, user_id: UUID) -> list[Membership]:
        """Get all memberships held by a user."""
        ...

    async def add_membership(self, membership: Membership) -> Membership:
        """Insert a membership."""
        ...

    async def remove_membership(self, user_id: UUID, group_id: UUID) -> bool:
        """Delete the membership of a user in a group."""
        ...

    async def delete_memberships(self, group_id: UUID) -> int:
        """Delete every membership of a group. Returns the deleted row count."""
        ...

    async def count_members(self, group_id: UUID) -> int:
        """Count memberships in a group."""
        ...
