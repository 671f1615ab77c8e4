"""Unit tests for GroupService."""

from uuid import UUID, uuid4

import pytest

from core.exceptions import GroupNotFoundError, InsufficientPermissionsError
from domain.entities.deal import Deal
from domain.entities.group import Group, GroupVisibility, MembershipRole
from domain.services.group_service import GroupService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> GroupService:
    return GroupService(lambda: uow)


@pytest.fixture
def group(curator_id: UUID) -> Group:
    return Group(name="Seed Syndicate", curator_id=curator_id)


# --- create ---


class TestCreate:
    async def test_creates_group_with_curator_membership(
        self, service: GroupService, uow: FakeUnitOfWork, curator_id: UUID
    ):
        uow.groups.create.side_effect = lambda g: g

        group = await service.create(
            curator_id,
            "  Seed Syndicate  ",
            description="  Early stage  ",
            sector=" ",
            visibility=GroupVisibility.PUBLIC,
        )

        assert group.name == "Seed Syndicate"
        assert group.description == "Early stage"
        assert group.sector is None
        assert group.visibility == GroupVisibility.PUBLIC
        assert len(group.invite_code) == 8

        membership = uow.groups.add_membership.await_args.args[0]
        assert membership.user_id == curator_id
        assert membership.group_id == group.id
        assert membership.role == MembershipRole.CURATOR
        assert uow.committed

    async def test_defaults_to_private(
        self, service: GroupService, uow: FakeUnitOfWork, curator_id: UUID
    ):
        uow.groups.create.side_effect = lambda g: g

        group = await service.create(curator_id, "Quiet Club")

        assert group.visibility == GroupVisibility.PRIVATE


# --- reads ---


class TestReads:
    async def test_get_by_id_includes_member_count(
        self, service: GroupService, uow: FakeUnitOfWork, group: Group
    ):
        uow.groups.get.return_value = group
        uow.groups.count_members.return_value = 4

        view = await service.get_by_id(group.id)

        assert view.group is group
        assert view.member_count == 4

    async def test_get_by_id_raises_when_missing(
        self, service: GroupService, uow: FakeUnitOfWork
    ):
        uow.groups.get.return_value = None

        with pytest.raises(GroupNotFoundError):
            await service.get_by_id(uuid4())

    async def test_invite_code_is_normalized(
        self, service: GroupService, uow: FakeUnitOfWork, group: Group
    ):
        uow.groups.get_by_invite_code.return_value = group
        uow.groups.count_members.return_value = 1

        view = await service.get_by_invite_code("  abcd1234 ")

        assert view.group is group
        uow.groups.get_by_invite_code.assert_awaited_once_with("ABCD1234")

    async def test_blank_invite_code_raises(self, service: GroupService, uow: FakeUnitOfWork):
        with pytest.raises(GroupNotFoundError):
            await service.get_by_invite_code("   ")
        uow.groups.get_by_invite_code.assert_not_called()

    async def test_get_public(self, service: GroupService, uow: FakeUnitOfWork, group: Group):
        uow.groups.get_public.return_value = [group]
        uow.groups.count_members.return_value = 2

        views = await service.get_public()

        assert [v.group for v in views] == [group]
        assert views[0].member_count == 2


# --- update ---


class TestUpdate:
    async def test_curator_updates_fields(
        self, service: GroupService, uow: FakeUnitOfWork, group: Group, curator_id: UUID
    ):
        uow.groups.get.return_value = group
        uow.groups.update.side_effect = lambda g: g

        updated = await service.update(
            group.id,
            curator_id,
            name="Renamed",
            description="",
            visibility=GroupVisibility.PUBLIC,
        )

        assert updated.name == "Renamed"
        assert updated.description is None
        assert updated.visibility == GroupVisibility.PUBLIC
        assert uow.committed

    async def test_non_curator_is_refused(
        self, service: GroupService, uow: FakeUnitOfWork, group: Group, user_id: UUID
    ):
        uow.groups.get.return_value = group

        with pytest.raises(InsufficientPermissionsError):
            await service.update(group.id, user_id, name="Hijack")
        uow.groups.update.assert_not_called()


# --- delete ---


class TestDelete:
    async def test_deletes_everything_the_group_owns(
        self, service: GroupService, uow: FakeUnitOfWork, group: Group, curator_id: UUID
    ):
        deal = Deal(name="Acme", group_id=group.id, created_by=curator_id)
        uow.groups.get.return_value = group
        uow.deals.get_for_group.return_value = [deal]
        uow.applications.delete_for_group.return_value = 3
        uow.groups.delete_memberships.return_value = 5

        await service.delete(group.id, curator_id)

        uow.comments.delete_for_deal.assert_awaited_once_with(deal.id)
        uow.deals.delete_documents_for_deal.assert_awaited_once_with(deal.id)
        uow.deals.delete.assert_awaited_once_with(deal.id)
        uow.applications.delete_for_group.assert_awaited_once_with(group.id)
        uow.groups.delete_memberships.assert_awaited_once_with(group.id)
        uow.groups.delete.assert_awaited_once_with(group.id)
        assert uow.committed

    async def test_non_curator_is_refused(
        self, service: GroupService, uow: FakeUnitOfWork, group: Group, user_id: UUID
    ):
        uow.groups.get.return_value = group

        with pytest.raises(InsufficientPermissionsError):
            await service.delete(group.id, user_id)
        uow.groups.delete.assert_not_called()

    async def test_missing_group_raises(
        self, service: GroupService, uow: FakeUnitOfWork, curator_id: UUID
    ):
        uow.groups.get.return_value = None

        with pytest.raises(GroupNotFoundError):
            await service.delete(uuid4(), curator_id)
