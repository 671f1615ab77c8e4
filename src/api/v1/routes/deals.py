"""Deal API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentProfile
from api.dependencies.permissions import require_curator, require_member
from api.dependencies.services import get_deal_service, get_identity_service
from api.v1.schemas.deal import (
    DealCreate,
    DealDetailResponse,
    DealListResponse,
    DealResponse,
    DealUpdate,
    DocumentResponse,
)
from core.rate_limit import limiter
from domain.entities.deal import Deal, Document
from domain.services.deal_service import DealService
from domain.services.identity_service import IdentityService

router = APIRouter(tags=["deals"])


def _build_deal_response(
    deal: Deal, documents: list[Document] | None = None
) -> DealResponse:
    return DealResponse(
        id=deal.id,
        name=deal.name,
        description=deal.description,
        group_id=deal.group_id,
        created_by=deal.created_by,
        created_at=deal.created_at,
        updated_at=deal.updated_at,
        documents=(
            [DocumentResponse.model_validate(d) for d in documents]
            if documents is not None
            else None
        ),
    )


@router.get(
    "/groups/{group_id}/deals",
    response_model=DealListResponse,
    summary="List a group's deals",
    responses={403: {"description": "Not a member"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_deals(
    request: Request,
    group_id: UUID,
    profile: CurrentProfile,
    service: DealService = Depends(get_deal_service),
    identity: IdentityService = Depends(get_identity_service),
) -> DealListResponse:
    await require_member(identity, profile.id, group_id)
    deals = await service.get_for_group(group_id)
    data = [_build_deal_response(d) for d in deals]
    return DealListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/groups/{group_id}/deals",
    response_model=DealDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a deal",
    responses={403: {"description": "Only the curator can create deals"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_deal(
    request: Request,
    group_id: UUID,
    body: DealCreate,
    profile: CurrentProfile,
    service: DealService = Depends(get_deal_service),
    identity: IdentityService = Depends(get_identity_service),
) -> DealDetailResponse:
    await require_curator(identity, profile.id, group_id)
    deal = await service.create(group_id, body.name, body.description, profile.id)
    return DealDetailResponse(data=_build_deal_response(deal, documents=[]))


@router.get(
    "/deals/{deal_id}",
    response_model=DealDetailResponse,
    summary="Get a deal with its documents",
    responses={
        403: {"description": "Not a member"},
        404: {"description": "Deal not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_deal(
    request: Request,
    deal_id: UUID,
    profile: CurrentProfile,
    service: DealService = Depends(get_deal_service),
    identity: IdentityService = Depends(get_identity_service),
) -> DealDetailResponse:
    view = await service.get_by_id(deal_id)
    await require_member(identity, profile.id, view.deal.group_id)
    return DealDetailResponse(data=_build_deal_response(view.deal, view.documents))


@router.patch(
    "/deals/{deal_id}",
    response_model=DealDetailResponse,
    summary="Update a deal",
    responses={
        403: {"description": "Only the curator can update deals"},
        404: {"description": "Deal not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_deal(
    request: Request,
    deal_id: UUID,
    body: DealUpdate,
    profile: CurrentProfile,
    service: DealService = Depends(get_deal_service),
    identity: IdentityService = Depends(get_identity_service),
) -> DealDetailResponse:
    deal = await service.get(deal_id)
    await require_curator(identity, profile.id, deal.group_id)
    updated = await service.update(deal_id, name=body.name, description=body.description)
    return DealDetailResponse(data=_build_deal_response(updated))


@router.delete(
    "/deals/{deal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a deal",
    responses={
        204: {"description": "Deal, its comments and its documents deleted"},
        403: {"description": "Only the curator can delete deals"},
        404: {"description": "Deal not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_deal(
    request: Request,
    deal_id: UUID,
    profile: CurrentProfile,
    service: DealService = Depends(get_deal_service),
    identity: IdentityService = Depends(get_identity_service),
) -> None:
    deal = await service.get(deal_id)
    await require_curator(identity, profile.id, deal.group_id)
    await service.delete(deal_id)
    return None
