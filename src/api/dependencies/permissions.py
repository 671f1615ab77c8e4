"""Authorization guards used by route handlers before calling a workflow."""

from uuid import UUID

from core.exceptions import InsufficientPermissionsError, NotAMemberError
from domain.entities.group import MembershipRole
from domain.services.identity_service import IdentityService


async def require_member(
    identity: IdentityService, user_id: UUID, group_id: UUID
) -> MembershipRole:
    """Return the caller's role in the group, or raise if they hold none."""
    role = await identity.membership_role_of(user_id, group_id)
    if role == MembershipRole.NONE:
        raise NotAMemberError(str(group_id))
    return role


async def require_curator(
    identity: IdentityService, user_id: UUID, group_id: UUID
) -> None:
    """Raise unless the caller curates the group."""
    if not await identity.can_manage_members(user_id, group_id):
        raise InsufficientPermissionsError("curator")
