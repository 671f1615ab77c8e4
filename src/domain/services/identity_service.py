"""Identity and role resolution for group and comment permissions."""

from collections.abc import Callable
from uuid import UUID

from domain.entities import comment as comment_rules
from domain.entities.comment import Comment
from domain.entities.group import MembershipRole, can_access_group, can_manage_members
from domain.repositories.unit_of_work import IUnitOfWork


class IdentityService:
    """Answers what a user may do inside a group or on a comment.

    Missing identifiers resolve to ``MembershipRole.NONE`` / ``False``
    without touching storage.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def membership_role_of(
        self, user_id: UUID | None, group_id: UUID | None
    ) -> MembershipRole:
        """Get the user's standing in the group."""
        if not user_id or not group_id:
            return MembershipRole.NONE

        async with self._uow_factory() as uow:
            membership = await uow.groups.get_membership(user_id, group_id)

        return membership.role if membership else MembershipRole.NONE

    async def is_curator(self, user_id: UUID | None, group_id: UUID | None) -> bool:
        return await self.membership_role_of(user_id, group_id) == MembershipRole.CURATOR

    async def can_manage_members(
        self, user_id: UUID | None, group_id: UUID | None
    ) -> bool:
        return can_manage_members(await self.membership_role_of(user_id, group_id))

    async def can_access_group(
        self, user_id: UUID | None, group_id: UUID | None
    ) -> bool:
        return can_access_group(await self.membership_role_of(user_id, group_id))

    async def role_for_deal(
        self, user_id: UUID | None, deal_id: UUID | None
    ) -> MembershipRole:
        """Get the user's standing in the group that owns the deal."""
        if not user_id or not deal_id:
            return MembershipRole.NONE

        async with self._uow_factory() as uow:
            deal = await uow.deals.get(deal_id)
            if deal is None:
                return MembershipRole.NONE
            membership = await uow.groups.get_membership(user_id, deal.group_id)

        return membership.role if membership else MembershipRole.NONE

    async def can_resolve_comment(
        self, user_id: UUID | None, comment: Comment | None
    ) -> bool:
        """Curators of the comment's deal's group resolve and unresolve."""
        if comment is None:
            return False
        return comment_rules.can_resolve_comment(
            await self.role_for_deal(user_id, comment.deal_id)
        )

    def can_edit_comment(self, user_id: UUID | None, comment: Comment | None) -> bool:
        if not user_id or comment is None:
            return False
        return comment_rules.can_edit_comment(comment, user_id)

    async def can_delete_comment(
        self, user_id: UUID | None, comment: Comment | None
    ) -> bool:
        if not user_id or comment is None:
            return False
        if comment_rules.can_edit_comment(comment, user_id):
            return True
        role = await self.role_for_deal(user_id, comment.deal_id)
        return comment_rules.can_delete_comment(comment, user_id, role)

    async def can_view_comment(
        self, user_id: UUID | None, comment: Comment | None
    ) -> bool:
        if not user_id or comment is None:
            return False
        role = await self.role_for_deal(user_id, comment.deal_id)
        return comment_rules.can_view_comment(comment, user_id, role)
