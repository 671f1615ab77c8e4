"""Comment domain entities and thread assembly."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from domain.entities.group import MembershipRole
from domain.entities.user import UserSummary

PREVIEW_LENGTH = 200


class CommentVisibility(StrEnum):
    """Who may read a comment.

    ``public`` is readable by every group member; ``private`` only by the
    author and the group's curators.
    """

    PUBLIC = "public"
    PRIVATE = "private"


@dataclass
class Comment:
    """Domain entity for a message on a deal."""

    content: str
    user_id: UUID
    deal_id: UUID
    id: UUID = field(default_factory=uuid4)
    parent_id: UUID | None = None
    visibility: CommentVisibility = CommentVisibility.PUBLIC
    resolved: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_top_level(self) -> bool:
        """Top-level comments start a thread and are the only resolvable ones."""
        return self.parent_id is None

    @property
    def is_private(self) -> bool:
        return self.visibility == CommentVisibility.PRIVATE


@dataclass
class CommentNode:
    """A comment with its author and the replies attached to it."""

    comment: Comment
    user: UserSummary | None = None
    replies: list["CommentNode"] = field(default_factory=list)


def build_threads(nodes: list[CommentNode]) -> list[CommentNode]:
    """Assemble a flat, creation-ordered list of comments into threads.

    Comments without a parent are top-level. A reply is attached to its
    parent when the parent is part of ``nodes``; when it is not (for
    example a reply to a private comment the caller cannot see), the reply
    is promoted to top-level instead of being dropped. Input order is kept
    both at the top level and within each reply list.
    """
    by_id: dict[UUID, CommentNode] = {}
    for node in nodes:
        node.replies = []
        by_id[node.comment.id] = node

    top_level: list[CommentNode] = []
    for node in by_id.values():
        parent_id = node.comment.parent_id
        if parent_id is None:
            top_level.append(node)
            continue

        parent = by_id.get(parent_id)
        if parent is not None:
            parent.replies.append(node)
        else:
            top_level.append(node)

    return top_level


def preview(content: str, length: int = PREVIEW_LENGTH) -> str:
    """Cap content at ``length`` characters, appending an ellipsis when cut."""
    if len(content) > length:
        return content[:length] + "..."
    return content


# --- Permission predicates ---


def can_edit_comment(comment: Comment, user_id: UUID) -> bool:
    """Only the author edits content or visibility."""
    return comment.user_id == user_id


def can_delete_comment(comment: Comment, user_id: UUID, role: MembershipRole) -> bool:
    """The author or a curator of the deal's group."""
    return comment.user_id == user_id or role == MembershipRole.CURATOR


def can_view_comment(comment: Comment, user_id: UUID, role: MembershipRole) -> bool:
    """Public comments are visible to the group; private ones to author and curators."""
    if not comment.is_private:
        return role != MembershipRole.NONE
    return comment.user_id == user_id or role == MembershipRole.CURATOR


def can_resolve_comment(role: MembershipRole) -> bool:
    """Resolution state belongs to the group's curators."""
    return role == MembershipRole.CURATOR
