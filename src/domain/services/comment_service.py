"""Comment workflow: threaded discussion on deals."""

from collections.abc import Callable
from typing import Optional
from uuid import UUID

import structlog

from core.exceptions import StorageError
from domain.entities.comment import Comment, CommentNode, CommentVisibility, build_threads
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.notification_service import NotificationService

logger = structlog.get_logger()


def _clean(content: str | None) -> str:
    return content.strip() if content else ""


class CommentService:
    """Service layer for deal comments.

    Operations return ``None`` / ``[]`` / ``False`` for missing input,
    missing rows and storage failures alike; they never raise. Callers are
    expected to check permissions with ``IdentityService`` first.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notification_service: Optional["NotificationService"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._notification = notification_service

    async def create_comment(
        self,
        deal_id: UUID | None,
        user_id: UUID | None,
        content: str | None,
        visibility: CommentVisibility = CommentVisibility.PUBLIC,
        parent_id: UUID | None = None,
    ) -> Comment | None:
        """
        Post a comment or, with ``parent_id``, a reply.

        Args:
            deal_id: Deal the comment belongs to
            user_id: Author
            content: Text, stored trimmed; blank text is refused
            visibility: ``public`` or ``private``
            parent_id: Comment being replied to; must be on the same deal

        Returns:
            The created comment, or None
        """
        text = _clean(content)
        if not deal_id or not user_id or not text:
            return None

        try:
            async with self._uow_factory() as uow:
                if parent_id is not None:
                    parent = await uow.comments.get(parent_id)
                    if parent is None or parent.deal_id != deal_id:
                        logger.warning(
                            "create_comment_invalid_parent",
                            deal_id=str(deal_id),
                            parent_id=str(parent_id),
                        )
                        return None

                comment = await uow.comments.create(
                    Comment(
                        content=text,
                        user_id=user_id,
                        deal_id=deal_id,
                        parent_id=parent_id,
                        visibility=CommentVisibility(visibility),
                    )
                )
                await uow.commit()
        except StorageError:
            logger.exception("create_comment_failed", deal_id=str(deal_id))
            return None

        logger.info(
            "comment_created",
            comment_id=str(comment.id),
            deal_id=str(deal_id),
            is_reply=parent_id is not None,
        )
        if self._notification:
            self._notification.notify_comment_created(comment)
        return comment

    async def get_comments(
        self,
        deal_id: UUID | None,
        include_private: bool = False,
        viewer_id: UUID | None = None,
    ) -> list[CommentNode]:
        """Get a deal's comments as threads, oldest first.

        Replies whose parent is not visible to the caller are returned as
        top-level comments.
        """
        if not deal_id:
            return []

        try:
            async with self._uow_factory() as uow:
                nodes = await uow.comments.get_for_deal(
                    deal_id, include_private, viewer_id
                )
        except StorageError:
            logger.exception("get_comments_failed", deal_id=str(deal_id))
            return []

        return build_threads(nodes)

    async def get_comment(self, comment_id: UUID | None) -> Comment | None:
        if not comment_id:
            return None

        try:
            async with self._uow_factory() as uow:
                return await uow.comments.get(comment_id)
        except StorageError:
            logger.exception("get_comment_failed", comment_id=str(comment_id))
            return None

    async def update_comment(
        self, comment_id: UUID | None, content: str | None
    ) -> Comment | None:
        """Replace a comment's content. Author, deal, parent and visibility stay."""
        text = _clean(content)
        if not comment_id or not text:
            return None

        try:
            async with self._uow_factory() as uow:
                updated = await uow.comments.update_content(comment_id, text)
                if updated is None:
                    return None
                await uow.commit()
        except StorageError:
            logger.exception("update_comment_failed", comment_id=str(comment_id))
            return None

        return updated

    async def set_visibility(
        self, comment_id: UUID | None, visibility: CommentVisibility | None
    ) -> Comment | None:
        """Change who can read a comment."""
        if not comment_id or not visibility:
            return None

        try:
            async with self._uow_factory() as uow:
                updated = await uow.comments.set_visibility(
                    comment_id, CommentVisibility(visibility)
                )
                if updated is None:
                    return None
                await uow.commit()
        except StorageError:
            logger.exception("set_comment_visibility_failed", comment_id=str(comment_id))
            return None

        return updated

    async def delete_comment(self, comment_id: UUID | None) -> bool:
        """Delete a comment together with its direct replies."""
        if not comment_id:
            return False

        try:
            async with self._uow_factory() as uow:
                replies = await uow.comments.delete_replies(comment_id)
                deleted = await uow.comments.delete(comment_id)
                if not deleted:
                    await uow.rollback()
                    return False
                await uow.commit()
        except StorageError:
            logger.exception("delete_comment_failed", comment_id=str(comment_id))
            return False

        logger.info("comment_deleted", comment_id=str(comment_id), replies_deleted=replies)
        return True

    async def resolve_comment(self, comment_id: UUID | None) -> Comment | None:
        """Mark a top-level comment resolved."""
        return await self._set_resolved(comment_id, True)

    async def unresolve_comment(self, comment_id: UUID | None) -> Comment | None:
        """Reopen a resolved top-level comment."""
        return await self._set_resolved(comment_id, False)

    async def _set_resolved(self, comment_id: UUID | None, resolved: bool) -> Comment | None:
        if not comment_id:
            return None

        try:
            async with self._uow_factory() as uow:
                comment = await uow.comments.get(comment_id)
                if comment is None or not comment.is_top_level:
                    return None
                if comment.resolved == resolved:
                    return comment

                updated = await uow.comments.set_resolved(comment_id, resolved)
                if updated is None:
                    return None
                await uow.commit()
        except StorageError:
            logger.exception(
                "set_comment_resolved_failed",
                comment_id=str(comment_id),
                resolved=resolved,
            )
            return None

        return updated
