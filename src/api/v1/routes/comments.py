"""Comment API routes: threads, replies, edits and resolution."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentProfile
from api.dependencies.permissions import require_member
from api.dependencies.services import (
    get_comment_service,
    get_deal_service,
    get_identity_service,
)
from api.v1.schemas.comment import (
    CommentCreate,
    CommentDetailResponse,
    CommentListResponse,
    CommentResponse,
    CommentUpdate,
)
from api.v1.schemas.user import UserSummaryResponse
from core.exceptions import (
    ActionFailedError,
    CommentNotFoundError,
    InsufficientPermissionsError,
)
from core.rate_limit import limiter
from domain.entities.comment import Comment, CommentNode, CommentVisibility
from domain.entities.group import MembershipRole
from domain.services.comment_service import CommentService
from domain.services.deal_service import DealService
from domain.services.identity_service import IdentityService

router = APIRouter(tags=["comments"])


def _build_comment_response(comment: Comment) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        content=comment.content,
        user_id=comment.user_id,
        deal_id=comment.deal_id,
        parent_id=comment.parent_id,
        visibility=comment.visibility.value,
        resolved=comment.resolved,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


def _build_thread_response(node: CommentNode) -> CommentResponse:
    response = _build_comment_response(node.comment)
    response.user = UserSummaryResponse.model_validate(node.user) if node.user else None
    response.replies = [_build_thread_response(r) for r in node.replies]
    return response


async def _load_comment(service: CommentService, comment_id: UUID) -> Comment:
    comment = await service.get_comment(comment_id)
    if comment is None:
        raise CommentNotFoundError(str(comment_id))
    return comment


@router.get(
    "/deals/{deal_id}/comments",
    response_model=CommentListResponse,
    summary="List a deal's comment threads",
    responses={403: {"description": "Not a member"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_comments(
    request: Request,
    deal_id: UUID,
    profile: CurrentProfile,
    service: CommentService = Depends(get_comment_service),
    deals: DealService = Depends(get_deal_service),
    identity: IdentityService = Depends(get_identity_service),
) -> CommentListResponse:
    """Curators see every comment; members see public ones and their own private ones."""
    deal = await deals.get(deal_id)
    role = await require_member(identity, profile.id, deal.group_id)

    threads = await service.get_comments(
        deal_id,
        include_private=role == MembershipRole.CURATOR,
        viewer_id=profile.id,
    )
    data = [_build_thread_response(n) for n in threads]
    return CommentListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/deals/{deal_id}/comments",
    response_model=CommentDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post a comment or reply",
    responses={
        400: {"description": "Empty content or parent not on this deal"},
        403: {"description": "Not a member"},
        404: {"description": "Parent comment not found or not visible"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_comment(
    request: Request,
    deal_id: UUID,
    body: CommentCreate,
    profile: CurrentProfile,
    service: CommentService = Depends(get_comment_service),
    deals: DealService = Depends(get_deal_service),
    identity: IdentityService = Depends(get_identity_service),
) -> CommentDetailResponse:
    deal = await deals.get(deal_id)
    await require_member(identity, profile.id, deal.group_id)
    if body.parent_id is not None:
        parent = await _load_comment(service, body.parent_id)
        if not await identity.can_view_comment(profile.id, parent):
            raise CommentNotFoundError(str(body.parent_id))

    comment = await service.create_comment(
        deal_id,
        profile.id,
        body.content,
        visibility=CommentVisibility(body.visibility),
        parent_id=body.parent_id,
    )
    if comment is None:
        raise ActionFailedError("create_comment")
    return CommentDetailResponse(data=_build_comment_response(comment))


@router.patch(
    "/comments/{comment_id}",
    response_model=CommentDetailResponse,
    summary="Edit a comment",
    responses={
        403: {"description": "Only the author can edit"},
        404: {"description": "Comment not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_comment(
    request: Request,
    comment_id: UUID,
    body: CommentUpdate,
    profile: CurrentProfile,
    service: CommentService = Depends(get_comment_service),
    identity: IdentityService = Depends(get_identity_service),
) -> CommentDetailResponse:
    """Change the content and/or the visibility of one's own comment."""
    comment = await _load_comment(service, comment_id)
    if not identity.can_edit_comment(profile.id, comment):
        raise InsufficientPermissionsError("author")

    updated: Comment | None = comment
    if body.content is not None:
        updated = await service.update_comment(comment_id, body.content)
        if updated is None:
            raise ActionFailedError("update_comment")
    if body.visibility is not None:
        updated = await service.set_visibility(
            comment_id, CommentVisibility(body.visibility)
        )
        if updated is None:
            raise ActionFailedError("update_comment")

    return CommentDetailResponse(data=_build_comment_response(updated))


@router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment and its replies",
    responses={
        204: {"description": "Comment deleted"},
        403: {"description": "Only the author or a curator can delete"},
        404: {"description": "Comment not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_comment(
    request: Request,
    comment_id: UUID,
    profile: CurrentProfile,
    service: CommentService = Depends(get_comment_service),
    identity: IdentityService = Depends(get_identity_service),
) -> None:
    comment = await _load_comment(service, comment_id)
    if not await identity.can_delete_comment(profile.id, comment):
        raise InsufficientPermissionsError("author or curator")
    if not await service.delete_comment(comment_id):
        raise ActionFailedError("delete_comment")
    return None


async def _set_resolved(
    service: CommentService,
    identity: IdentityService,
    comment_id: UUID,
    user_id: UUID,
    resolved: bool,
) -> CommentDetailResponse:
    comment = await _load_comment(service, comment_id)
    if not await identity.can_resolve_comment(user_id, comment):
        raise InsufficientPermissionsError("curator")

    if resolved:
        updated = await service.resolve_comment(comment_id)
    else:
        updated = await service.unresolve_comment(comment_id)
    if updated is None:
        raise ActionFailedError("resolve_comment" if resolved else "unresolve_comment")
    return CommentDetailResponse(data=_build_comment_response(updated))


@router.post(
    "/comments/{comment_id}/resolve",
    response_model=CommentDetailResponse,
    summary="Resolve a comment thread",
    responses={
        400: {"description": "Replies cannot be resolved"},
        403: {"description": "Only a curator can resolve"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def resolve_comment(
    request: Request,
    comment_id: UUID,
    profile: CurrentProfile,
    service: CommentService = Depends(get_comment_service),
    identity: IdentityService = Depends(get_identity_service),
) -> CommentDetailResponse:
    return await _set_resolved(service, identity, comment_id, profile.id, True)


@router.post(
    "/comments/{comment_id}/unresolve",
    response_model=CommentDetailResponse,
    summary="Reopen a comment thread",
    responses={
        400: {"description": "Replies cannot be resolved"},
        403: {"description": "Only a curator can unresolve"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def unresolve_comment(
    request: Request,
    comment_id: UUID,
    profile: CurrentProfile,
    service: CommentService = Depends(get_comment_service),
    identity: IdentityService = Depends(get_identity_service),
) -> CommentDetailResponse:
    return await _set_resolved(service, identity, comment_id, profile.id, False)
