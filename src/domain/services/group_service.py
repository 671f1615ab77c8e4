"""Group service layer with business logic."""

from datetime import datetime
from typing import Callable, List, Optional

from uuid import UUID

import structlog

from core.exceptions import GroupNotFoundError, InsufficientPermissionsError
from domain.entities.group import (
    Group,
    GroupView,
    GroupVisibility,
    Membership,
    MembershipRole,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class GroupService:
    """Service layer for investment groups."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def create(
        self,
        curator_id: UUID,
        name: str,
        description: Optional[str] = None,
        sector: Optional[str] = None,
        visibility: GroupVisibility = GroupVisibility.PRIVATE,
    ) -> Group:
        """Create a group. The creator becomes its curator in the same transaction."""
        async with self._uow_factory() as uow:
            group = Group(
                name=name.strip(),
                curator_id=curator_id,
                description=_optional(description),
                sector=_optional(sector),
                visibility=GroupVisibility(visibility),
            )
            created = await uow.groups.create(group)

            await uow.groups.add_membership(
                Membership(
                    user_id=curator_id,
                    group_id=created.id,
                    role=MembershipRole.CURATOR,
                )
            )

            await uow.commit()

        logger.info("group_created", group_id=str(created.id), curator_id=str(curator_id))
        return created

    async def get_public(self) -> List[GroupView]:
        """Get public groups for browsing, newest first."""
        async with self._uow_factory() as uow:
            groups = await uow.groups.get_public()
            return [
                GroupView(group=g, member_count=await uow.groups.count_members(g.id))
                for g in groups
            ]

    async def get_user_groups(self, user_id: UUID) -> List[GroupView]:
        """Get the groups a user curates or belongs to."""
        async with self._uow_factory() as uow:
            groups = await uow.groups.get_for_user(user_id)
            return [
                GroupView(group=g, member_count=await uow.groups.count_members(g.id))
                for g in groups
            ]

    async def get_by_id(self, group_id: UUID) -> GroupView:
        async with self._uow_factory() as uow:
            group = await uow.groups.get(group_id)
            if not group:
                raise GroupNotFoundError(str(group_id))

            count = await uow.groups.count_members(group_id)
            return GroupView(group=group, member_count=count)

    async def get_by_invite_code(self, invite_code: str) -> GroupView:
        """Resolve an invite link to its group."""
        code = invite_code.strip().upper()
        async with self._uow_factory() as uow:
            group = await uow.groups.get_by_invite_code(code) if code else None
            if not group:
                raise GroupNotFoundError(code)

            count = await uow.groups.count_members(group.id)
            return GroupView(group=group, member_count=count)

    async def update(
        self,
        group_id: UUID,
        curator_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        sector: Optional[str] = None,
        visibility: Optional[GroupVisibility] = None,
    ) -> Group:
        """Update group details. Only the curator may do this."""
        async with self._uow_factory() as uow:
            group = await self._get_curated(uow, group_id, curator_id)

            if name is not None:
                group.name = name.strip()
            if description is not None:
                group.description = _optional(description)
            if sector is not None:
                group.sector = _optional(sector)
            if visibility is not None:
                group.visibility = GroupVisibility(visibility)
            group.updated_at = datetime.utcnow()

            updated = await uow.groups.update(group)
            await uow.commit()
            return updated

    async def delete(self, group_id: UUID, curator_id: UUID) -> None:
        """Delete a group and everything it owns. Only the curator may do this."""
        async with self._uow_factory() as uow:
            await self._get_curated(uow, group_id, curator_id)

            for deal in await uow.deals.get_for_group(group_id):
                await uow.comments.delete_for_deal(deal.id)
                await uow.deals.delete_documents_for_deal(deal.id)
                await uow.deals.delete(deal.id)

            applications = await uow.applications.delete_for_group(group_id)
            memberships = await uow.groups.delete_memberships(group_id)
            await uow.groups.delete(group_id)
            await uow.commit()

        logger.info(
            "group_deleted",
            group_id=str(group_id),
            memberships_deleted=memberships,
            applications_deleted=applications,
        )

    # --- Private helpers ---

    async def _get_curated(
        self, uow: IUnitOfWork, group_id: UUID, curator_id: UUID
    ) -> Group:
        group = await uow.groups.get(group_id)
        if not group:
            raise GroupNotFoundError(str(group_id))
        if group.curator_id != curator_id:
            raise InsufficientPermissionsError("curator")
        return group
