"""Document API routes: upload, list, download URL and delete."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Request, UploadFile, status

from api.dependencies.auth import CurrentProfile
from api.dependencies.permissions import require_curator, require_member
from api.dependencies.services import (
    get_deal_service,
    get_document_service,
    get_identity_service,
)
from api.v1.schemas.deal import (
    DocumentDetailResponse,
    DocumentListResponse,
    DocumentResponse,
    DocumentUrlResponse,
)
from core.config import settings
from core.exceptions import ActionFailedError
from core.rate_limit import limiter
from domain.services.deal_service import DealService
from domain.services.document_service import DocumentService
from domain.services.identity_service import IdentityService

router = APIRouter(tags=["documents"])


@router.post(
    "/deals/{deal_id}/documents",
    response_model=DocumentDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a document",
    responses={
        403: {"description": "Only the curator can upload documents"},
        404: {"description": "Deal not found"},
        502: {"description": "Object storage refused the upload"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def upload_document(
    request: Request,
    deal_id: UUID,
    profile: CurrentProfile,
    file: UploadFile = File(...),
    service: DocumentService = Depends(get_document_service),
    deals: DealService = Depends(get_deal_service),
    identity: IdentityService = Depends(get_identity_service),
) -> DocumentDetailResponse:
    deal = await deals.get(deal_id)
    await require_curator(identity, profile.id, deal.group_id)

    if not file.filename:
        raise ActionFailedError("upload_document")

    content = await file.read()
    document = await service.upload(
        deal_id,
        filename=file.filename,
        content=content,
        content_type=file.content_type or "application/octet-stream",
        user_id=profile.id,
    )
    return DocumentDetailResponse(data=DocumentResponse.model_validate(document))


@router.get(
    "/deals/{deal_id}/documents",
    response_model=DocumentListResponse,
    summary="List a deal's documents",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_documents(
    request: Request,
    deal_id: UUID,
    profile: CurrentProfile,
    service: DocumentService = Depends(get_document_service),
    deals: DealService = Depends(get_deal_service),
    identity: IdentityService = Depends(get_identity_service),
) -> DocumentListResponse:
    deal = await deals.get(deal_id)
    await require_member(identity, profile.id, deal.group_id)
    documents = await service.list_for_deal(deal_id)
    data = [DocumentResponse.model_validate(d) for d in documents]
    return DocumentListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/documents/{document_id}/url",
    response_model=DocumentUrlResponse,
    summary="Get a signed download URL",
    responses={404: {"description": "Document not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_document_url(
    request: Request,
    document_id: UUID,
    profile: CurrentProfile,
    service: DocumentService = Depends(get_document_service),
    deals: DealService = Depends(get_deal_service),
    identity: IdentityService = Depends(get_identity_service),
) -> DocumentUrlResponse:
    document = await service.get(document_id)
    deal = await deals.get(document.deal_id)
    await require_member(identity, profile.id, deal.group_id)
    url = await service.get_url(document_id)
    return DocumentUrlResponse(url=url, expires_in=settings.signed_url_expiry_seconds)


@router.delete(
    "/documents/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a document",
    responses={
        204: {"description": "Document deleted"},
        403: {"description": "Only the uploader or the curator can delete"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_document(
    request: Request,
    document_id: UUID,
    profile: CurrentProfile,
    service: DocumentService = Depends(get_document_service),
    deals: DealService = Depends(get_deal_service),
    identity: IdentityService = Depends(get_identity_service),
) -> None:
    document = await service.get(document_id)
    if document.uploaded_by != profile.id:
        deal = await deals.get(document.deal_id)
        await require_curator(identity, profile.id, deal.group_id)
    await service.delete(document_id)
    return None
