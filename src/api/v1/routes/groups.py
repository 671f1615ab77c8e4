"""Group API routes: groups, invite links and members."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentProfile
from api.dependencies.permissions import require_curator, require_member
from api.dependencies.services import (
    get_group_service,
    get_identity_service,
    get_membership_service,
)
from api.v1.schemas.group import (
    GroupCreate,
    GroupDetailResponse,
    GroupListResponse,
    GroupResponse,
    GroupUpdate,
    MembershipListResponse,
    MembershipResponse,
)
from api.v1.schemas.user import UserSummaryResponse
from core.exceptions import (
    ActionFailedError,
    InsufficientPermissionsError,
    LastCuratorError,
    NotAMemberError,
)
from core.rate_limit import limiter
from domain.entities.group import (
    Group,
    GroupView,
    GroupVisibility,
    MemberView,
    MembershipRole,
)
from domain.entities.user import PlatformRole
from domain.services.group_service import GroupService
from domain.services.identity_service import IdentityService
from domain.services.membership_service import MembershipService

router = APIRouter(prefix="/groups", tags=["groups"])


def _build_group_response(group: Group, member_count: int = 0) -> GroupResponse:
    return GroupResponse(
        id=group.id,
        name=group.name,
        description=group.description,
        visibility=group.visibility.value,
        invite_code=group.invite_code,
        curator_id=group.curator_id,
        sector=group.sector,
        member_count=member_count,
        created_at=group.created_at,
        updated_at=group.updated_at,
    )


def _build_view_response(view: GroupView) -> GroupResponse:
    return _build_group_response(view.group, view.member_count)


def _build_member_response(view: MemberView) -> MembershipResponse:
    m = view.membership
    return MembershipResponse(
        id=m.id,
        user_id=m.user_id,
        group_id=m.group_id,
        role=m.role.value,
        created_at=m.created_at,
        user=UserSummaryResponse.model_validate(view.user) if view.user else None,
    )


@router.get(
    "",
    response_model=GroupListResponse,
    summary="Browse public groups",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_public_groups(
    request: Request,
    profile: CurrentProfile,
    service: GroupService = Depends(get_group_service),
) -> GroupListResponse:
    """Public groups, newest first."""
    views = await service.get_public()
    data = [_build_view_response(v) for v in views]
    return GroupListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/mine",
    response_model=GroupListResponse,
    summary="List my groups",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_my_groups(
    request: Request,
    profile: CurrentProfile,
    service: GroupService = Depends(get_group_service),
) -> GroupListResponse:
    """Groups the caller curates or belongs to."""
    views = await service.get_user_groups(profile.id)
    data = [_build_view_response(v) for v in views]
    return GroupListResponse(data=data, meta={"total": len(data)})


@router.post(
    "",
    response_model=GroupDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
    responses={
        201: {"description": "Group created, caller is its curator"},
        403: {"description": "Caller has not chosen the curator role"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_group(
    request: Request,
    body: GroupCreate,
    profile: CurrentProfile,
    service: GroupService = Depends(get_group_service),
) -> GroupDetailResponse:
    if profile.role != PlatformRole.CURATOR:
        raise InsufficientPermissionsError("curator")

    group = await service.create(
        curator_id=profile.id,
        name=body.name,
        description=body.description,
        sector=body.sector,
        visibility=GroupVisibility(body.visibility),
    )
    return GroupDetailResponse(data=_build_group_response(group, member_count=1))


@router.get(
    "/invite/{invite_code}",
    response_model=GroupDetailResponse,
    summary="Resolve an invite code",
    responses={404: {"description": "Invalid invite code"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_group_by_invite(
    request: Request,
    invite_code: str,
    profile: CurrentProfile,
    service: GroupService = Depends(get_group_service),
) -> GroupDetailResponse:
    """Invite links reveal the group even when it is private."""
    view = await service.get_by_invite_code(invite_code)
    return GroupDetailResponse(data=_build_view_response(view))


@router.get(
    "/{group_id}",
    response_model=GroupDetailResponse,
    summary="Get a group",
    responses={
        403: {"description": "Private group and caller is not a member"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_group(
    request: Request,
    group_id: UUID,
    profile: CurrentProfile,
    service: GroupService = Depends(get_group_service),
    identity: IdentityService = Depends(get_identity_service),
) -> GroupDetailResponse:
    view = await service.get_by_id(group_id)
    if view.group.visibility == GroupVisibility.PRIVATE:
        await require_member(identity, profile.id, group_id)
    return GroupDetailResponse(data=_build_view_response(view))


@router.patch(
    "/{group_id}",
    response_model=GroupDetailResponse,
    summary="Update a group",
    responses={
        403: {"description": "Only the curator can update the group"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_group(
    request: Request,
    group_id: UUID,
    body: GroupUpdate,
    profile: CurrentProfile,
    service: GroupService = Depends(get_group_service),
) -> GroupDetailResponse:
    group = await service.update(
        group_id,
        profile.id,
        name=body.name,
        description=body.description,
        sector=body.sector,
        visibility=GroupVisibility(body.visibility) if body.visibility else None,
    )
    view = await service.get_by_id(group.id)
    return GroupDetailResponse(data=_build_view_response(view))


@router.delete(
    "/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a group",
    responses={
        204: {"description": "Group and everything in it deleted"},
        403: {"description": "Only the curator can delete the group"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_group(
    request: Request,
    group_id: UUID,
    profile: CurrentProfile,
    service: GroupService = Depends(get_group_service),
) -> None:
    await service.delete(group_id, profile.id)
    return None


# --- Members ---


@router.get(
    "/{group_id}/members",
    response_model=MembershipListResponse,
    summary="List group members",
    responses={403: {"description": "Not a member"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    group_id: UUID,
    profile: CurrentProfile,
    identity: IdentityService = Depends(get_identity_service),
    memberships: MembershipService = Depends(get_membership_service),
) -> MembershipListResponse:
    await require_member(identity, profile.id, group_id)
    views = await memberships.get_memberships(group_id)
    data = [_build_member_response(v) for v in views]
    return MembershipListResponse(data=data, meta={"total": len(data)})


async def _remove(
    memberships: MembershipService, user_id: UUID, group_id: UUID, action: str
) -> None:
    role = await memberships.get_membership_role(user_id, group_id)
    if role == MembershipRole.NONE:
        raise NotAMemberError(str(group_id))
    if role == MembershipRole.CURATOR:
        raise LastCuratorError()
    if not await memberships.remove_member(user_id, group_id):
        raise ActionFailedError(action)


@router.delete(
    "/{group_id}/members/{member_user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a member",
    responses={
        204: {"description": "Member removed"},
        400: {"description": "The curator cannot be removed"},
        403: {"description": "Only the curator can remove members"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_member(
    request: Request,
    group_id: UUID,
    member_user_id: UUID,
    profile: CurrentProfile,
    identity: IdentityService = Depends(get_identity_service),
    memberships: MembershipService = Depends(get_membership_service),
) -> None:
    await require_curator(identity, profile.id, group_id)
    await _remove(memberships, member_user_id, group_id, "remove_member")
    return None


@router.post(
    "/{group_id}/leave",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Leave a group",
    responses={
        204: {"description": "Membership removed"},
        400: {"description": "The curator cannot leave their group"},
        403: {"description": "Not a member"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def leave_group(
    request: Request,
    group_id: UUID,
    profile: CurrentProfile,
    memberships: MembershipService = Depends(get_membership_service),
) -> None:
    await _remove(memberships, profile.id, group_id, "leave_group")
    return None
