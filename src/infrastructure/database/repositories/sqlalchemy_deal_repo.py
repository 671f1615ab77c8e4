"""SQLAlchemy implementation of Deal repository."""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.deal import Deal, Document
from infrastructure.database.models import DealModel, DocumentModel


class SQLAlchemyDealRepository:
    """SQLAlchemy implementation of IDealRepository (deals and their documents)."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Deal | None:
        """Get a deal by ID."""
        model = await self._session.get(DealModel, id)
        return self._to_entity(model) if model else None

    async def get_for_group(self, group_id: UUID) -> list[Deal]:
        stmt = (
            select(DealModel)
            .where(DealModel.group_id == group_id)
            .order_by(DealModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, deal: Deal) -> Deal:
        """Create a new deal."""
        model = self._to_model(deal)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, deal: Deal) -> Deal:
        """Update an existing deal."""
        model = await self._session.get(DealModel, deal.id)
        if not model:
            raise ValueError(f"Deal {deal.id} not found")

        model.name = deal.name
        model.description = deal.description
        model.updated_at = deal.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a deal. Comments and documents must already be gone."""
        result = await self._session.execute(delete(DealModel).where(DealModel.id == id))
        return result.rowcount > 0

    # --- Documents ---

    async def get_document(self, id: UUID) -> Document | None:
        model = await self._session.get(DocumentModel, id)
        return self._document_to_entity(model) if model else None

    async def get_documents(self, deal_id: UUID) -> list[Document]:
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.deal_id == deal_id)
            .order_by(DocumentModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._document_to_entity(model) for model in result.scalars()]

    async def add_document(self, document: Document) -> Document:
        model = self._document_to_model(document)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._document_to_entity(model)

    async def delete_document(self, id: UUID) -> bool:
        result = await self._session.execute(
            delete(DocumentModel).where(DocumentModel.id == id)
        )
        return result.rowcount > 0

    async def delete_documents_for_deal(self, deal_id: UUID) -> int:
        result = await self._session.execute(
            delete(DocumentModel).where(DocumentModel.deal_id == deal_id)
        )
        return result.rowcount

    def _to_entity(self, model: DealModel) -> Deal:
        """Convert ORM model to domain entity."""
        return Deal(
            id=model.id,
            name=model.name,
            description=model.description,
            group_id=model.group_id,
            created_by=model.created_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Deal) -> DealModel:
        """Convert domain entity to ORM model."""
        return DealModel(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            group_id=entity.group_id,
            created_by=entity.created_by,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _document_to_entity(self, model: DocumentModel) -> Document:
        return Document(
            id=model.id,
            filename=model.filename,
            file_size=model.file_size,
            mime_type=model.mime_type,
            storage_path=model.storage_path,
            deal_id=model.deal_id,
            uploaded_by=model.uploaded_by,
            created_at=model.created_at,
        )

    def _document_to_model(self, entity: Document) -> DocumentModel:
        return DocumentModel(
            id=entity.id,
            filename=entity.filename,
            file_size=entity.file_size,
            mime_type=entity.mime_type,
            storage_path=entity.storage_path,
            deal_id=entity.deal_id,
            uploaded_by=entity.uploaded_by,
            created_at=entity.created_at,
        )
