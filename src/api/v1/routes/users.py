"""User API routes: sign-in sync, onboarding and profile."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentProfile, CurrentUser
from api.dependencies.services import get_user_service
from api.v1.schemas.user import RoleUpdate, UserDetailResponse, UserResponse, UserUpdate
from core.rate_limit import limiter
from domain.entities.user import User
from domain.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def _build_user_response(user: User) -> UserDetailResponse:
    return UserDetailResponse(
        data=UserResponse(
            id=user.id,
            external_ref=user.external_ref,
            name=user.name,
            email=user.email,
            role=user.role.value if user.role else None,
            profile_link=user.profile_link,
            bio=user.bio,
            is_onboarded=user.is_onboarded,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
    )


@router.post(
    "/sync",
    response_model=UserDetailResponse,
    summary="Sync the signed-in user",
    responses={
        200: {"description": "User created or refreshed"},
        401: {"description": "Missing or invalid token"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def sync_user(
    request: Request,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> UserDetailResponse:
    """Create the profile on first sign-in, or refresh email and name from the token."""
    synced = await service.sync_user(user.subject, email=user.email, name=user.display_name)
    return _build_user_response(synced)


@router.get(
    "/me",
    response_model=UserDetailResponse,
    summary="Get my profile",
    responses={404: {"description": "Profile not synced yet"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_me(request: Request, profile: CurrentProfile) -> UserDetailResponse:
    return _build_user_response(profile)


@router.patch(
    "/me",
    response_model=UserDetailResponse,
    summary="Update my profile",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_me(
    request: Request,
    body: UserUpdate,
    profile: CurrentProfile,
    service: UserService = Depends(get_user_service),
) -> UserDetailResponse:
    updated = await service.update_profile(
        profile.id,
        name=body.name,
        email=body.email,
        profile_link=body.profile_link,
        bio=body.bio,
    )
    return _build_user_response(updated)


@router.put(
    "/me/role",
    response_model=UserDetailResponse,
    summary="Choose my platform role",
    responses={400: {"description": "Role is not curator or investor"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def set_my_role(
    request: Request,
    body: RoleUpdate,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> UserDetailResponse:
    """Onboarding step: become a curator or an investor."""
    updated = await service.set_role(user.subject, body.role)
    return _build_user_response(updated)
