"""Membership workflow: reading and removing group memberships."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import StorageError
from domain.entities.group import MemberView, Membership, MembershipRole
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class MembershipService:
    """Service layer for group memberships.

    Operations return ``None`` / ``[]`` / ``False`` for missing input,
    missing rows and storage failures alike; they never raise.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_membership(
        self, user_id: UUID | None, group_id: UUID | None
    ) -> Membership | None:
        """Get the membership row for the pair, if any."""
        if not user_id or not group_id:
            return None

        try:
            async with self._uow_factory() as uow:
                return await uow.groups.get_membership(user_id, group_id)
        except StorageError:
            logger.exception("get_membership_failed", user_id=str(user_id), group_id=str(group_id))
            return None

    async def get_membership_role(
        self, user_id: UUID | None, group_id: UUID | None
    ) -> MembershipRole:
        membership = await self.get_membership(user_id, group_id)
        return membership.role if membership else MembershipRole.NONE

    async def is_curator(self, user_id: UUID | None, group_id: UUID | None) -> bool:
        return await self.get_membership_role(user_id, group_id) == MembershipRole.CURATOR

    async def get_memberships(self, group_id: UUID | None) -> list[MemberView]:
        """List the members of a group with their user summary."""
        if not group_id:
            return []

        try:
            async with self._uow_factory() as uow:
                return await uow.groups.get_members(group_id)
        except StorageError:
            logger.exception("get_memberships_failed", group_id=str(group_id))
            return []

    async def get_user_memberships(self, user_id: UUID | None) -> list[Membership]:
        """List every membership held by a user."""
        if not user_id:
            return []

        try:
            async with self._uow_factory() as uow:
                return await uow.groups.get_memberships_for_user(user_id)
        except StorageError:
            logger.exception("get_user_memberships_failed", user_id=str(user_id))
            return []

    async def create_membership(
        self,
        user_id: UUID | None,
        group_id: UUID | None,
        role: MembershipRole = MembershipRole.MEMBER,
    ) -> Membership | None:
        """Add a user to a group. An existing membership is returned as is."""
        if not user_id or not group_id or role == MembershipRole.NONE:
            return None

        try:
            async with self._uow_factory() as uow:
                existing = await uow.groups.get_membership(user_id, group_id)
                if existing:
                    return existing

                membership = await uow.groups.add_membership(
                    Membership(user_id=user_id, group_id=group_id, role=role)
                )
                await uow.commit()
        except StorageError:
            logger.exception("create_membership_failed", user_id=str(user_id), group_id=str(group_id))
            return None

        logger.info(
            "membership_created",
            user_id=str(user_id),
            group_id=str(group_id),
            role=role.value,
        )
        return membership

    async def remove_member(self, user_id: UUID | None, group_id: UUID | None) -> bool:
        """Delete the membership for the pair.

        Curator memberships are never removed here; a group keeps its
        curator for its whole lifetime.
        """
        if not user_id or not group_id:
            return False

        try:
            async with self._uow_factory() as uow:
                membership = await uow.groups.get_membership(user_id, group_id)
                if membership is None:
                    return False
                if membership.role == MembershipRole.CURATOR:
                    logger.warning(
                        "remove_member_curator_refused",
                        user_id=str(user_id),
                        group_id=str(group_id),
                    )
                    return False

                removed = await uow.groups.remove_membership(user_id, group_id)
                await uow.commit()
        except StorageError:
            logger.exception("remove_member_failed", user_id=str(user_id), group_id=str(group_id))
            return False

        if removed:
            logger.info("member_removed", user_id=str(user_id), group_id=str(group_id))
        return removed
