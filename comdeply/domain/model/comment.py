"""Comment entity.

Comments form a bounded-depth reply tree inside a (site, page) thread.
Display order is carried by ``sort_order``, a base-10 decimal key: roots
get integer keys and replies get fractional keys inside their parent's
interval, so the whole thread can be rebuilt by sorting the flat set and
grouping by ``parent_id``.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from comdeply.domain.error import AlreadyDeletedError, CannotEditDeletedError
from comdeply.domain.model.common import DomainModel
from comdeply.domain.value import (
    CommentId,
    CommentState,
    CommentStatus,
    ThreadScope,
    UserId,
)
from comdeply.util.clock import utc_now


class Comment(DomainModel):
    """Comment entity.

    Threading is managed through:
    - parent_id: Direct parent comment (None for roots)
    - depth: 1 for roots, min(parent.depth + 1, max_depth) for replies
    - sort_order: Decimal key, unique among siblings within the thread

    Lifecycle is an explicit state (see CommentState) rather than a
    deleted flag; transition methods reject illegal moves.
    """

    id: CommentId
    site_key: str = Field(min_length=1, max_length=100)
    page_id: str = Field(min_length=1, max_length=255)
    author_id: UserId
    author_name: str = Field(min_length=1, max_length=100)  # Denormalized
    content: str = Field(min_length=1, max_length=10000)
    parent_id: Optional[CommentId] = None
    depth: int = Field(default=1, ge=1)
    sort_order: Decimal
    state: CommentState = CommentState.ACTIVE
    status: CommentStatus = CommentStatus.PENDING
    like_count: int = Field(default=0, ge=0)
    dislike_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def scope(self) -> ThreadScope:
        return ThreadScope(site_key=self.site_key, page_id=self.page_id)

    @property
    def is_deleted(self) -> bool:
        return self.state.is_deleted

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def is_moderated(self) -> bool:
        return self.status is not CommentStatus.PENDING

    def tombstone(self, placeholder: str) -> "Comment":
        """Soft-delete a comment that still has living replies.

        The row stays in the tree with its content replaced.
        """
        if self.is_deleted:
            raise AlreadyDeletedError("comment", str(self.id))
        return self.model_copy(
            update={
                "state": CommentState.DELETED_WITH_DESCENDANTS,
                "content": placeholder,
                "updated_at": utc_now(),
            }
        )

    def mark_dead(self) -> "Comment":
        """Move an active comment or a tombstone to DELETED_LEAF."""
        if self.state is CommentState.DELETED_LEAF:
            raise AlreadyDeletedError("comment", str(self.id))
        return self.model_copy(
            update={"state": CommentState.DELETED_LEAF, "updated_at": utc_now()}
        )

    def edit(self, content: str) -> "Comment":
        """Replace the content of an active comment."""
        if self.is_deleted:
            raise CannotEditDeletedError("comment", str(self.id))
        # Re-validate through the constructor so length limits apply
        return Comment.model_validate(
            {**self.model_dump(), "content": content, "updated_at": utc_now()}
        )

    def with_status(self, status: CommentStatus) -> "Comment":
        """Change the moderation status of an active comment."""
        if self.is_deleted:
            raise CannotEditDeletedError("comment", str(self.id))
        return self.model_copy(update={"status": status, "updated_at": utc_now()})
