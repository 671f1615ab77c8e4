"""Unit tests for comment thread assembly and permission predicates."""

from uuid import uuid4

from domain.entities.comment import (
    Comment,
    CommentNode,
    CommentVisibility,
    build_threads,
    can_delete_comment,
    can_edit_comment,
    can_resolve_comment,
    can_view_comment,
    preview,
)
from domain.entities.group import MembershipRole


def _comment(parent: Comment | None = None, **kwargs) -> Comment:
    deal_id = parent.deal_id if parent else kwargs.pop("deal_id", uuid4())
    return Comment(
        content=kwargs.pop("content", "text"),
        user_id=kwargs.pop("user_id", uuid4()),
        deal_id=deal_id,
        parent_id=parent.id if parent else None,
        **kwargs,
    )


class TestBuildThreads:
    def test_attaches_replies_in_order(self):
        root = _comment()
        first = _comment(root)
        second = _comment(root)
        other = _comment(deal_id=root.deal_id)

        threads = build_threads(
            [CommentNode(root), CommentNode(first), CommentNode(other), CommentNode(second)]
        )

        assert [t.comment for t in threads] == [root, other]
        assert [r.comment for r in threads[0].replies] == [first, second]
        assert threads[1].replies == []

    def test_orphaned_reply_is_promoted_to_top_level(self):
        hidden_parent = _comment(visibility=CommentVisibility.PRIVATE)
        orphan = _comment(hidden_parent)

        threads = build_threads([CommentNode(orphan)])

        assert [t.comment for t in threads] == [orphan]

    def test_replies_are_rebuilt_on_every_call(self):
        root = _comment()
        nodes = [CommentNode(root), CommentNode(_comment(root))]

        build_threads(nodes)
        threads = build_threads(nodes)

        assert len(threads[0].replies) == 1

    def test_empty_input(self):
        assert build_threads([]) == []


class TestPreview:
    def test_short_content_is_unchanged(self):
        assert preview("hello") == "hello"

    def test_long_content_is_cut_with_ellipsis(self):
        assert preview("a" * 201) == "a" * 200 + "..."

    def test_exact_length_is_unchanged(self):
        assert preview("a" * 200) == "a" * 200


class TestPredicates:
    def test_edit_is_author_only(self):
        comment = _comment()

        assert can_edit_comment(comment, comment.user_id)
        assert not can_edit_comment(comment, uuid4())

    def test_delete_by_author_or_curator(self):
        comment = _comment()

        assert can_delete_comment(comment, comment.user_id, MembershipRole.MEMBER)
        assert can_delete_comment(comment, uuid4(), MembershipRole.CURATOR)
        assert not can_delete_comment(comment, uuid4(), MembershipRole.MEMBER)

    def test_public_comment_visible_to_members(self):
        comment = _comment()

        assert can_view_comment(comment, uuid4(), MembershipRole.MEMBER)
        assert not can_view_comment(comment, uuid4(), MembershipRole.NONE)

    def test_private_comment_visible_to_author_and_curator(self):
        comment = _comment(visibility=CommentVisibility.PRIVATE)

        assert can_view_comment(comment, comment.user_id, MembershipRole.MEMBER)
        assert can_view_comment(comment, uuid4(), MembershipRole.CURATOR)
        assert not can_view_comment(comment, uuid4(), MembershipRole.MEMBER)

    def test_resolve_is_curator_only(self):
        assert can_resolve_comment(MembershipRole.CURATOR)
        assert not can_resolve_comment(MembershipRole.MEMBER)
        assert not can_resolve_comment(MembershipRole.NONE)
