"""Comment views returned by the use cases.

Deleted comments are redacted here and only here: the domain keeps their
rows (and a tombstone keeps its replies), the views hide who wrote them
and what they said.
"""

from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from comdeply.config import CommentSettings
from comdeply.domain.model import Comment
from comdeply.domain.service import CommentNode
from comdeply.domain.value import (
    CommentId,
    CommentState,
    CommentStatus,
    ReactionType,
)


class CommentSummary(BaseModel):
    """Flat comment item in responses."""

    comment_id: str
    site_key: str
    page_id: str
    parent_id: str | None
    author_id: str | None  # None once deleted
    author_name: str | None  # None once deleted
    content: str
    depth: int
    sort_order: str  # Decimal as string, keeps every digit
    state: CommentState
    status: CommentStatus
    is_deleted: bool
    like_count: int
    dislike_count: int
    viewer_reaction: ReactionType | None = None
    created_at: datetime
    updated_at: datetime


class CommentNodeView(CommentSummary):
    """Comment item with its nested replies."""

    children: list["CommentNodeView"] = Field(default_factory=list)


def _redacted_content(comment: Comment, settings: CommentSettings) -> str:
    if comment.state is CommentState.DELETED_LEAF:
        return settings.deleted_placeholder
    # Tombstones already carry the placeholder chosen at deletion time
    return comment.content


def to_summary(
    comment: Comment,
    settings: CommentSettings,
    viewer_reaction: Optional[ReactionType] = None,
) -> CommentSummary:
    """Convert a comment to its public view, redacting deleted ones."""
    deleted = comment.is_deleted
    return CommentSummary(
        comment_id=str(comment.id),
        site_key=comment.site_key,
        page_id=comment.page_id,
        parent_id=str(comment.parent_id) if comment.parent_id else None,
        author_id=None if deleted else str(comment.author_id),
        author_name=None if deleted else comment.author_name,
        content=_redacted_content(comment, settings),
        depth=comment.depth,
        sort_order=str(comment.sort_order),
        state=comment.state,
        status=comment.status,
        is_deleted=deleted,
        like_count=comment.like_count,
        dislike_count=comment.dislike_count,
        viewer_reaction=viewer_reaction,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


def to_node_views(
    nodes: Iterable[CommentNode],
    settings: CommentSettings,
    reactions: Optional[dict[CommentId, ReactionType]] = None,
) -> list[CommentNodeView]:
    """Convert a comment forest to nested views.

    Walks with an explicit stack so deep reply chains stay off the
    interpreter stack.
    """
    reactions = reactions or {}

    def _view(node: CommentNode) -> CommentNodeView:
        summary = to_summary(node.comment, settings, reactions.get(node.comment.id))
        return CommentNodeView(**summary.model_dump())

    roots: list[CommentNodeView] = []
    stack: list[tuple[CommentNode, CommentNodeView]] = []
    for node in nodes:
        view = _view(node)
        roots.append(view)
        stack.append((node, view))

    while stack:
        node, view = stack.pop()
        for child in node.children:
            child_view = _view(child)
            view.children.append(child_view)
            stack.append((child, child_view))

    return roots


def page_window(
    offset: int, limit: Optional[int], settings: CommentSettings
) -> tuple[int, int]:
    """Clamp pagination arguments to the configured bounds."""
    if limit is None:
        limit = settings.default_page_size
    return max(offset, 0), min(max(limit, 1), settings.max_page_size)
