"""Deal service layer: document folders inside a group."""

from datetime import datetime
from typing import Callable, List, Optional

from uuid import UUID

import structlog

from core.exceptions import DealNotFoundError
from domain.entities.deal import Deal, DealView
from domain.gateways.object_storage import IObjectStorage
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class DealService:
    """Service layer for deals. Group access is checked by the caller."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        storage: Optional[IObjectStorage] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._storage = storage

    async def create(
        self,
        group_id: UUID,
        name: str,
        description: Optional[str],
        user_id: UUID,
    ) -> Deal:
        async with self._uow_factory() as uow:
            deal = await uow.deals.create(
                Deal(
                    name=name.strip(),
                    group_id=group_id,
                    created_by=user_id,
                    description=(description or "").strip() or None,
                )
            )
            await uow.commit()

        logger.info("deal_created", deal_id=str(deal.id), group_id=str(group_id))
        return deal

    async def get_for_group(self, group_id: UUID) -> List[Deal]:
        async with self._uow_factory() as uow:
            return await uow.deals.get_for_group(group_id)

    async def get(self, deal_id: UUID) -> Deal:
        """Get a deal without its documents."""
        async with self._uow_factory() as uow:
            deal = await uow.deals.get(deal_id)
            if not deal:
                raise DealNotFoundError(str(deal_id))
            return deal

    async def get_by_id(self, deal_id: UUID) -> DealView:
        """Get a deal with its documents."""
        async with self._uow_factory() as uow:
            deal = await uow.deals.get(deal_id)
            if not deal:
                raise DealNotFoundError(str(deal_id))

            documents = await uow.deals.get_documents(deal_id)
            return DealView(deal=deal, documents=documents)

    async def update(
        self,
        deal_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Deal:
        async with self._uow_factory() as uow:
            deal = await uow.deals.get(deal_id)
            if not deal:
                raise DealNotFoundError(str(deal_id))

            if name is not None:
                deal.name = name.strip()
            if description is not None:
                deal.description = description.strip() or None
            deal.updated_at = datetime.utcnow()

            updated = await uow.deals.update(deal)
            await uow.commit()
            return updated

    async def delete(self, deal_id: UUID) -> None:
        """Delete a deal with its comments and documents.

        Stored files are removed after the rows are gone; a failed removal is
        logged and leaves an orphaned object.
        """
        async with self._uow_factory() as uow:
            deal = await uow.deals.get(deal_id)
            if not deal:
                raise DealNotFoundError(str(deal_id))

            documents = await uow.deals.get_documents(deal_id)
            await uow.comments.delete_for_deal(deal_id)
            await uow.deals.delete_documents_for_deal(deal_id)
            await uow.deals.delete(deal_id)
            await uow.commit()

        logger.info("deal_deleted", deal_id=str(deal_id), documents_deleted=len(documents))

        if self._storage is None:
            return
        for document in documents:
            if not await self._storage.remove(document.storage_path):
                logger.warning(
                    "deal_document_storage_remove_failed",
                    deal_id=str(deal_id),
                    storage_path=document.storage_path,
                )
