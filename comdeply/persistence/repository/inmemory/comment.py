"""In-memory comment repository for testing."""

from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from sqlalchemy.exc import IntegrityError

from comdeply.domain.model.comment import Comment
from comdeply.domain.repository.comment import CommentRepository
from comdeply.domain.value import CommentId, CommentState, ThreadScope, UserId
from comdeply.util.clock import utc_now


def _key_order(comment: Comment) -> tuple:
    return (comment.sort_order, comment.created_at)


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing.

    Mirrors the database constraints that matter to callers: a sort key is
    unique within its sibling group and reaction counters never go
    negative.
    """

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}

    def _in_scope(self, scope: ThreadScope) -> list[Comment]:
        return [c for c in self._comments.values() if c.scope == scope]

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self._comments.get(comment_id)

    async def find_by_scope(
        self, scope: ThreadScope, include_dead: bool = False
    ) -> list[Comment]:
        """Find every comment of a thread ordered by sort key."""
        comments = self._in_scope(scope)

        if not include_dead:
            comments = [c for c in comments if c.state.is_living]

        return sorted(comments, key=_key_order)

    async def find_roots(
        self, scope: ThreadScope, offset: int = 0, limit: int = 20
    ) -> list[Comment]:
        """Find a page of visible root comments ordered by sort key."""
        roots = [c for c in self._in_scope(scope) if c.is_root and c.state.is_living]
        roots.sort(key=_key_order)
        return roots[offset : offset + limit]

    async def count_roots(self, scope: ThreadScope) -> int:
        """Count visible root comments of a thread."""
        return sum(
            1 for c in self._in_scope(scope) if c.is_root and c.state.is_living
        )

    async def find_children(
        self, parent_id: CommentId, include_dead: bool = False
    ) -> list[Comment]:
        """Find direct replies of a comment ordered by sort key."""
        children = [c for c in self._comments.values() if c.parent_id == parent_id]

        if not include_dead:
            children = [c for c in children if c.state.is_living]

        return sorted(children, key=_key_order)

    async def has_living_children(self, parent_id: CommentId) -> bool:
        """Check whether a comment has any reply that is not DELETED_LEAF."""
        return any(
            c.parent_id == parent_id and c.state.is_living
            for c in self._comments.values()
        )

    async def find_max_sort_order(
        self, scope: ThreadScope, parent_id: Optional[CommentId] = None
    ) -> Optional[Decimal]:
        """Find the largest sort key among siblings (deleted included)."""
        keys = [c.sort_order for c in self._in_scope(scope) if c.parent_id == parent_id]
        return max(keys) if keys else None

    async def acquire_sort_lock(
        self, scope: ThreadScope, parent_id: Optional[CommentId] = None
    ) -> None:
        """No-op: a single event loop already serializes in-memory writes."""

    async def save(self, comment: Comment) -> Comment:
        """Save or update a comment."""
        for other in self._comments.values():
            if (
                other.id != comment.id
                and other.scope == comment.scope
                and other.parent_id == comment.parent_id
                and other.sort_order == comment.sort_order
            ):
                raise IntegrityError("Duplicate sibling sort key", None, Exception())
        self._comments[comment.id] = comment
        return comment

    async def adjust_reaction_counts(
        self, comment_id: CommentId, like_delta: int, dislike_delta: int
    ) -> Optional[Comment]:
        """Atomically move the like/dislike counters, never below zero."""
        comment = self._comments.get(comment_id)
        if comment is None:
            return None
        return await self.set_reaction_counts(
            comment_id,
            max(comment.like_count + like_delta, 0),
            max(comment.dislike_count + dislike_delta, 0),
        )

    async def set_reaction_counts(
        self, comment_id: CommentId, like_count: int, dislike_count: int
    ) -> Optional[Comment]:
        """Overwrite the like/dislike counters."""
        comment = self._comments.get(comment_id)
        if comment is None:
            return None
        # Comments are immutable, store an updated copy
        updated = comment.model_copy(
            update={
                "like_count": like_count,
                "dislike_count": dislike_count,
                "updated_at": utc_now(),
            }
        )
        self._comments[comment_id] = updated
        return updated

    async def update_sort_orders(self, sort_orders: Mapping[CommentId, Decimal]) -> None:
        """Rewrite the sort keys of several comments."""
        staged = dict(self._comments)
        for comment_id, sort_order in sort_orders.items():
            comment = staged.get(comment_id)
            if comment is not None:
                staged[comment_id] = comment.model_copy(update={"sort_order": sort_order})

        # Checked after the whole batch, like a statement-level constraint
        seen: set[tuple] = set()
        for comment in staged.values():
            key = (comment.site_key, comment.page_id, comment.parent_id, comment.sort_order)
            if key in seen:
                raise IntegrityError("Duplicate sibling sort key", None, Exception())
            seen.add(key)
        self._comments = staged

    async def find_active_by_scope(
        self, scope: ThreadScope, offset: int = 0, limit: int = 20
    ) -> list[Comment]:
        """Find active comments of a thread in creation order."""
        comments = [c for c in self._in_scope(scope) if c.state is CommentState.ACTIVE]
        comments.sort(key=lambda c: (c.created_at, str(c.id)))
        return comments[offset : offset + limit]

    async def count_active_by_scope(self, scope: ThreadScope) -> int:
        """Count active comments of a thread."""
        return sum(
            1 for c in self._in_scope(scope) if c.state is CommentState.ACTIVE
        )

    async def find_by_author(
        self, author_id: UserId, offset: int = 0, limit: int = 20
    ) -> list[Comment]:
        """Find active comments by an author, newest first."""
        comments = [
            c
            for c in self._comments.values()
            if c.author_id == author_id and c.state is CommentState.ACTIVE
        ]

        # Sort by created_at descending
        comments.sort(key=lambda c: c.created_at, reverse=True)

        # Paginate
        return comments[offset : offset + limit]

    async def count_by_pages(
        self, site_key: str, page_ids: Sequence[str]
    ) -> dict[str, int]:
        """Count active comments for several pages of a site."""
        counts = {page_id: 0 for page_id in page_ids}
        for c in self._comments.values():
            if (
                c.site_key == site_key
                and c.page_id in counts
                and c.state is CommentState.ACTIVE
            ):
                counts[c.page_id] += 1
        return counts

    async def count_created_since(
        self, site_keys: Sequence[str], since: datetime
    ) -> int:
        """Count active comments created on the given sites since a moment."""
        keys = set(site_keys)
        return sum(
            1
            for c in self._comments.values()
            if c.site_key in keys
            and c.state is CommentState.ACTIVE
            and c.created_at >= since
        )
