"""SQLAlchemy implementation of Group repository."""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.group import (
    Group,
    GroupVisibility,
    MemberView,
    Membership,
    MembershipRole,
)
from infrastructure.database.models import GroupModel, MembershipModel, UserModel
from infrastructure.database.repositories.sqlalchemy_user_repo import to_summary


class SQLAlchemyGroupRepository:
    """SQLAlchemy implementation of IGroupRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        model = await self._session.get(GroupModel, id)
        return self._to_entity(model) if model else None

    async def get_by_invite_code(self, invite_code: str) -> Group | None:
        stmt = select(GroupModel).where(GroupModel.invite_code == invite_code)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_public(self) -> list[Group]:
        """Get public groups, newest first."""
        stmt = (
            select(GroupModel)
            .where(GroupModel.visibility == GroupVisibility.PUBLIC.value)
            .order_by(GroupModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_for_user(self, user_id: UUID) -> list[Group]:
        """Get the groups a user holds a membership in."""
        stmt = (
            select(GroupModel)
            .join(MembershipModel, MembershipModel.group_id == GroupModel.id)
            .where(MembershipModel.user_id == user_id)
            .order_by(MembershipModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        model = self._to_model(group)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, group: Group) -> Group:
        """Update an existing group."""
        model = await self._session.get(GroupModel, group.id)
        if not model:
            raise ValueError(f"Group {group.id} not found")

        model.name = group.name
        model.description = group.description
        model.sector = group.sector
        model.visibility = group.visibility.value
        model.updated_at = group.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a group. Memberships must already be gone."""
        model = await self._session.get(GroupModel, id)
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    # --- Memberships ---

    async def get_membership(self, user_id: UUID, group_id: UUID) -> Membership | None:
        stmt = select(MembershipModel).where(
            MembershipModel.user_id == user_id,
            MembershipModel.group_id == group_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._membership_to_entity(model) if model else None

    async def get_members(self, group_id: UUID) -> list[MemberView]:
        """Get a group's memberships joined with their users."""
        stmt = (
            select(MembershipModel, UserModel)
            .outerjoin(UserModel, UserModel.id == MembershipModel.user_id)
            .where(MembershipModel.group_id == group_id)
            .order_by(MembershipModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [
            MemberView(membership=self._membership_to_entity(m), user=to_summary(u))
            for m, u in result.all()
        ]

    async def get_memberships_for_user(self, user_id: UUID) -> list[Membership]:
        stmt = (
            select(MembershipModel)
            .where(MembershipModel.user_id == user_id)
            .order_by(MembershipModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._membership_to_entity(model) for model in result.scalars()]

    async def add_membership(self, membership: Membership) -> Membership:
        model = self._membership_to_model(membership)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._membership_to_entity(model)

    async def remove_membership(self, user_id: UUID, group_id: UUID) -> bool:
        stmt = delete(MembershipModel).where(
            MembershipModel.user_id == user_id,
            MembershipModel.group_id == group_id,
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def delete_memberships(self, group_id: UUID) -> int:
        stmt = delete(MembershipModel).where(MembershipModel.group_id == group_id)
        result = await self._session.execute(stmt)
        return result.rowcount

    async def count_members(self, group_id: UUID) -> int:
        """Count memberships in a group, curator included."""
        stmt = (
            select(func.count())
            .select_from(MembershipModel)
            .where(MembershipModel.group_id == group_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    def _to_entity(self, model: GroupModel) -> Group:
        """Convert ORM model to domain entity."""
        return Group(
            id=model.id,
            name=model.name,
            curator_id=model.curator_id,
            description=model.description,
            visibility=GroupVisibility(model.visibility),
            invite_code=model.invite_code,
            sector=model.sector,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Group) -> GroupModel:
        """Convert domain entity to ORM model."""
        return GroupModel(
            id=entity.id,
            name=entity.name,
            curator_id=entity.curator_id,
            description=entity.description,
            visibility=entity.visibility.value,
            invite_code=entity.invite_code,
            sector=entity.sector,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _membership_to_entity(self, model: MembershipModel) -> Membership:
        return Membership(
            id=model.id,
            user_id=model.user_id,
            group_id=model.group_id,
            role=MembershipRole(model.role),
            created_at=model.created_at,
        )

    def _membership_to_model(self, entity: Membership) -> MembershipModel:
        return MembershipModel(
            id=entity.id,
            user_id=entity.user_id,
            group_id=entity.group_id,
            role=entity.role.value,
            created_at=entity.created_at,
        )
