"""SQLAlchemy implementation of Comment repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.comment import Comment, CommentNode, CommentVisibility
from infrastructure.database.models import CommentModel, UserModel
from infrastructure.database.repositories.sqlalchemy_user_repo import to_summary


class SQLAlchemyCommentRepository:
    """SQLAlchemy implementation of ICommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Comment | None:
        """Get a comment by ID."""
        model = await self._session.get(CommentModel, id)
        return self._to_entity(model) if model else None

    async def get_for_deal(
        self,
        deal_id: UUID,
        include_private: bool,
        viewer_id: UUID | None = None,
    ) -> list[CommentNode]:
        """Get a deal's comments with their authors, oldest first."""
        stmt = (
            select(CommentModel, UserModel)
            .outerjoin(UserModel, UserModel.id == CommentModel.user_id)
            .where(CommentModel.deal_id == deal_id)
            .order_by(CommentModel.created_at, CommentModel.id)
        )
        if not include_private:
            public = CommentModel.visibility == CommentVisibility.PUBLIC.value
            if viewer_id is not None:
                stmt = stmt.where(or_(public, CommentModel.user_id == viewer_id))
            else:
                stmt = stmt.where(public)

        result = await self._session.execute(stmt)
        return [
            CommentNode(comment=self._to_entity(c), user=to_summary(u))
            for c, u in result.all()
        ]

    async def create(self, comment: Comment) -> Comment:
        """Create a new comment."""
        model = self._to_model(comment)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update_content(self, id: UUID, content: str) -> Comment | None:
        model = await self._session.get(CommentModel, id)
        if not model:
            return None

        model.content = content
        model.updated_at = datetime.utcnow()
        await self._session.flush()
        return self._to_entity(model)

    async def set_visibility(
        self, id: UUID, visibility: CommentVisibility
    ) -> Comment | None:
        model = await self._session.get(CommentModel, id)
        if not model:
            return None

        model.visibility = visibility.value
        model.updated_at = datetime.utcnow()
        await self._session.flush()
        return self._to_entity(model)

    async def set_resolved(self, id: UUID, resolved: bool) -> Comment | None:
        model = await self._session.get(CommentModel, id)
        if not model:
            return None

        model.resolved = resolved
        model.updated_at = datetime.utcnow()
        await self._session.flush()
        return self._to_entity(model)

    async def delete_replies(self, parent_id: UUID) -> int:
        """Delete the direct replies of a comment."""
        result = await self._session.execute(
            delete(CommentModel).where(CommentModel.parent_id == parent_id)
        )
        return result.rowcount

    async def delete(self, id: UUID) -> bool:
        result = await self._session.execute(
            delete(CommentModel).where(CommentModel.id == id)
        )
        return result.rowcount > 0

    async def delete_for_deal(self, deal_id: UUID) -> int:
        result = await self._session.execute(
            delete(CommentModel).where(CommentModel.deal_id == deal_id)
        )
        return result.rowcount

    def _to_entity(self, model: CommentModel) -> Comment:
        """Convert ORM model to domain entity."""
        return Comment(
            id=model.id,
            content=model.content,
            user_id=model.user_id,
            deal_id=model.deal_id,
            parent_id=model.parent_id,
            visibility=CommentVisibility(model.visibility),
            resolved=model.resolved,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Comment) -> CommentModel:
        """Convert domain entity to ORM model."""
        return CommentModel(
            id=entity.id,
            content=entity.content,
            user_id=entity.user_id,
            deal_id=entity.deal_id,
            parent_id=entity.parent_id,
            visibility=entity.visibility.value,
            resolved=entity.resolved,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
