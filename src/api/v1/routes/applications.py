"""Application API routes: applying to a group and reviewing applications."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentProfile
from api.dependencies.permissions import require_curator
from api.dependencies.services import (
    get_application_service,
    get_group_service,
    get_identity_service,
)
from api.v1.schemas.application import (
    ApplicationCreate,
    ApplicationDetailResponse,
    ApplicationListResponse,
    ApplicationResponse,
    PendingCountResponse,
)
from api.v1.schemas.user import UserSummaryResponse
from core.exceptions import ActionFailedError, ApplicationNotFoundError
from core.rate_limit import limiter
from domain.entities.application import Application
from domain.entities.user import UserSummary
from domain.services.application_service import ApplicationService
from domain.services.group_service import GroupService
from domain.services.identity_service import IdentityService

router = APIRouter(tags=["applications"])


def _build_application_response(
    application: Application, user: UserSummary | None = None
) -> ApplicationResponse:
    return ApplicationResponse(
        id=application.id,
        user_id=application.user_id,
        group_id=application.group_id,
        status=application.status.value,
        profile_link=application.profile_link,
        interest_statement=application.interest_statement,
        created_at=application.created_at,
        updated_at=application.updated_at,
        user=UserSummaryResponse.model_validate(user) if user else None,
    )


@router.post(
    "/groups/{group_id}/applications",
    response_model=ApplicationDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply to join a group",
    responses={
        201: {"description": "Application submitted, or the pending one returned"},
        400: {"description": "Caller is already a member"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def submit_application(
    request: Request,
    group_id: UUID,
    body: ApplicationCreate,
    profile: CurrentProfile,
    service: ApplicationService = Depends(get_application_service),
    groups: GroupService = Depends(get_group_service),
    identity: IdentityService = Depends(get_identity_service),
) -> ApplicationDetailResponse:
    """Submitting again while a request is pending returns the same application."""
    await groups.get_by_id(group_id)
    if await identity.can_access_group(profile.id, group_id):
        raise ActionFailedError("submit_application")

    application = await service.submit_application(
        group_id,
        profile.id,
        profile_link=body.profile_link or profile.profile_link,
        interest_statement=body.interest_statement,
    )
    if application is None:
        raise ActionFailedError("submit_application")
    return ApplicationDetailResponse(data=_build_application_response(application))


@router.get(
    "/groups/{group_id}/applications",
    response_model=ApplicationListResponse,
    summary="List a group's applications",
    responses={403: {"description": "Only the curator can review applications"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_applications(
    request: Request,
    group_id: UUID,
    profile: CurrentProfile,
    service: ApplicationService = Depends(get_application_service),
    identity: IdentityService = Depends(get_identity_service),
) -> ApplicationListResponse:
    await require_curator(identity, profile.id, group_id)
    views = await service.get_applications(group_id)
    data = [_build_application_response(v.application, v.user) for v in views]
    return ApplicationListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/groups/{group_id}/applications/pending-count",
    response_model=PendingCountResponse,
    summary="Count pending applications",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def pending_application_count(
    request: Request,
    group_id: UUID,
    profile: CurrentProfile,
    service: ApplicationService = Depends(get_application_service),
    identity: IdentityService = Depends(get_identity_service),
) -> PendingCountResponse:
    await require_curator(identity, profile.id, group_id)
    return PendingCountResponse(count=await service.get_pending_application_count(group_id))


@router.get(
    "/groups/{group_id}/applications/mine",
    response_model=ApplicationDetailResponse,
    summary="Get my latest application to a group",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_my_application(
    request: Request,
    group_id: UUID,
    profile: CurrentProfile,
    service: ApplicationService = Depends(get_application_service),
) -> ApplicationDetailResponse:
    application = await service.get_user_application(profile.id, group_id)
    return ApplicationDetailResponse(
        data=_build_application_response(application) if application else None
    )


async def _load_for_review(
    service: ApplicationService,
    identity: IdentityService,
    application_id: UUID,
    user_id: UUID,
) -> Application:
    application = await service.get_application(application_id)
    if application is None:
        raise ApplicationNotFoundError(str(application_id))
    await require_curator(identity, user_id, application.group_id)
    return application


@router.post(
    "/applications/{application_id}/approve",
    response_model=ApplicationDetailResponse,
    summary="Approve an application",
    responses={
        400: {"description": "Application was already rejected"},
        403: {"description": "Only the curator can approve"},
        404: {"description": "Application not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def approve_application(
    request: Request,
    application_id: UUID,
    profile: CurrentProfile,
    service: ApplicationService = Depends(get_application_service),
    identity: IdentityService = Depends(get_identity_service),
) -> ApplicationDetailResponse:
    """Approval also makes the applicant a member."""
    await _load_for_review(service, identity, application_id, profile.id)
    approved = await service.approve_application(application_id)
    if approved is None:
        raise ActionFailedError("approve_application")
    return ApplicationDetailResponse(data=_build_application_response(approved))


@router.post(
    "/applications/{application_id}/reject",
    response_model=ApplicationDetailResponse,
    summary="Reject an application",
    responses={
        400: {"description": "Application was already approved"},
        403: {"description": "Only the curator can reject"},
        404: {"description": "Application not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def reject_application(
    request: Request,
    application_id: UUID,
    profile: CurrentProfile,
    service: ApplicationService = Depends(get_application_service),
    identity: IdentityService = Depends(get_identity_service),
) -> ApplicationDetailResponse:
    await _load_for_review(service, identity, application_id, profile.id)
    rejected = await service.reject_application(application_id)
    if rejected is None:
        raise ActionFailedError("reject_application")
    return ApplicationDetailResponse(data=_build_application_response(rejected))
