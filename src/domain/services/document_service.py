"""Document service layer: files stored under a deal."""

from typing import Callable, List

from uuid import UUID

import structlog

from core.exceptions import DealNotFoundError, DocumentNotFoundError, StorageUploadError
from domain.entities.deal import Document, storage_path_for
from domain.gateways.object_storage import IObjectStorage
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

DEFAULT_URL_EXPIRY_SECONDS = 3600


class DocumentService:
    """Service layer for deal documents.

    Binaries go to object storage; the database keeps only the path.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        storage: IObjectStorage,
        url_expiry_seconds: int = DEFAULT_URL_EXPIRY_SECONDS,
    ) -> None:
        self._uow_factory = uow_factory
        self._storage = storage
        self._url_expiry = url_expiry_seconds

    async def upload(
        self,
        deal_id: UUID,
        filename: str,
        content: bytes,
        content_type: str,
        user_id: UUID,
    ) -> Document:
        """Store a file under ``{group_id}/{deal_id}/{filename}`` and record it."""
        async with self._uow_factory() as uow:
            deal = await uow.deals.get(deal_id)
            if not deal:
                raise DealNotFoundError(str(deal_id))

            path = storage_path_for(deal.group_id, deal_id, filename)
            if not await self._storage.upload(path, content, content_type):
                raise StorageUploadError(path)

            document = await uow.deals.add_document(
                Document(
                    filename=filename,
                    file_size=len(content),
                    mime_type=content_type,
                    storage_path=path,
                    deal_id=deal_id,
                    uploaded_by=user_id,
                )
            )
            await uow.commit()

        logger.info("document_uploaded", document_id=str(document.id), deal_id=str(deal_id))
        return document

    async def list_for_deal(self, deal_id: UUID) -> List[Document]:
        async with self._uow_factory() as uow:
            return await uow.deals.get_documents(deal_id)

    async def get(self, document_id: UUID) -> Document:
        async with self._uow_factory() as uow:
            document = await uow.deals.get_document(document_id)
            if not document:
                raise DocumentNotFoundError(str(document_id))
            return document

    async def get_url(self, document_id: UUID) -> str:
        """Create a time-limited download URL for a document."""
        document = await self.get(document_id)
        url = await self._storage.signed_url(document.storage_path, self._url_expiry)
        if not url:
            logger.warning("document_signed_url_failed", document_id=str(document_id))
            raise DocumentNotFoundError(str(document_id))
        return url

    async def delete(self, document_id: UUID) -> None:
        """Remove the stored file, then the row.

        A failed storage removal is logged and the row is deleted anyway.
        """
        async with self._uow_factory() as uow:
            document = await uow.deals.get_document(document_id)
            if not document:
                raise DocumentNotFoundError(str(document_id))

            if not await self._storage.remove(document.storage_path):
                logger.warning(
                    "document_storage_remove_failed",
                    document_id=str(document_id),
                    storage_path=document.storage_path,
                )

            await uow.deals.delete_document(document_id)
            await uow.commit()

        logger.info("document_deleted", document_id=str(document_id))
