"""Comment repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.comment import Comment, CommentNode, CommentVisibility


class ICommentRepository(Protocol):
    """Repository interface for Comment entities."""

    async def get(self, id: UUID) -> Comment | None:
        """Get a comment by ID."""
        ...

    async def get_for_deal(
        self,
        deal_id: UUID,
        include_private: bool,
        viewer_id: UUID | None = None,
    ) -> list[CommentNode]:
        """Get the comments of a deal with their authors, oldest first.

        Without ``include_private`` only public comments are returned, plus
        the private comments written by ``viewer_id`` when it is given.
        """
        ...

    async def create(self, comment: Comment) -> Comment:
        """Create a new comment."""
        ...

    async def update_content(self, id: UUID, content: str) -> Comment | None:
        """Replace the content and touch updated_at. Returns None if no row matched."""
        ...

    async def set_visibility(
        self, id: UUID, visibility: CommentVisibility
    ) -> Comment | None:
        """Change the visibility. Returns None if no row matched."""
        ...

    async def set_resolved(self, id: UUID, resolved: bool) -> Comment | None:
        """Set the resolved flag. Returns None if no row matched."""
        ...

    async def delete_replies(self, parent_id: UUID) -> int:
        """Delete the direct replies of a comment. Returns the deleted row count."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a single comment."""
        ...

    async def delete_for_deal(self, deal_id: UUID) -> int:
        """Delete every comment of a deal. Returns the deleted row count."""
        ...
