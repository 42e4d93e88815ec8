"""Comment repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence

from comdeply.domain.model.comment import Comment
from comdeply.domain.value import CommentId, ThreadScope, UserId


class CommentRepository(ABC):
    """Repository for Comment entity.

    Defines the contract for comment persistence operations.
    Implementations live in the infrastructure layer.

    "Visible" comments are every comment except DELETED_LEAF ones: active
    comments plus tombstones that still hold living replies.
    """

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID.

        Args:
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_scope(
        self, scope: ThreadScope, include_dead: bool = False
    ) -> List[Comment]:
        """Find every comment of a thread ordered by sort key.

        Args:
            scope: The thread
            include_dead: Whether to include DELETED_LEAF comments

        Returns:
            Comments ordered by sort_order
        """
        pass

    @abstractmethod
    async def find_roots(
        self, scope: ThreadScope, offset: int = 0, limit: int = 20
    ) -> List[Comment]:
        """Find a page of visible root comments ordered by sort key.

        Args:
            scope: The thread
            offset: Number of roots to skip
            limit: Maximum number of roots to return

        Returns:
            Root comments ordered by sort_order
        """
        pass

    @abstractmethod
    async def count_roots(self, scope: ThreadScope) -> int:
        """Count visible root comments of a thread."""
        pass

    @abstractmethod
    async def find_children(
        self, parent_id: CommentId, include_dead: bool = False
    ) -> List[Comment]:
        """Find direct replies of a comment ordered by sort key.

        Args:
            parent_id: The parent comment ID
            include_dead: Whether to include DELETED_LEAF comments

        Returns:
            List of child comments
        """
        pass

    @abstractmethod
    async def has_living_children(self, parent_id: CommentId) -> bool:
        """Check whether a comment has any reply that is not DELETED_LEAF.

        Always reads current state so cascade walks never act on a stale
        snapshot.
        """
        pass

    @abstractmethod
    async def find_max_sort_order(
        self, scope: ThreadScope, parent_id: Optional[CommentId] = None
    ) -> Optional[Decimal]:
        """Find the largest sort key among siblings.

        Deleted comments are included: their keys stay reserved.

        Args:
            scope: The thread
            parent_id: Parent of the sibling group, None for roots

        Returns:
            The maximum sort key, or None if the group is empty
        """
        pass

    @abstractmethod
    async def acquire_sort_lock(
        self, scope: ThreadScope, parent_id: Optional[CommentId] = None
    ) -> None:
        """Serialize key assignment for one sibling group.

        The lock is held until the surrounding transaction ends.
        """
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update).

        Args:
            comment: The comment to save

        Returns:
            The saved comment

        Raises:
            IntegrityError: If a sibling already holds the same sort key
        """
        pass

    @abstractmethod
    async def adjust_reaction_counts(
        self, comment_id: CommentId, like_delta: int, dislike_delta: int
    ) -> Optional[Comment]:
        """Atomically move the like/dislike counters, never below zero.

        Returns:
            The updated comment, or None if it does not exist
        """
        pass

    @abstractmethod
    async def set_reaction_counts(
        self, comment_id: CommentId, like_count: int, dislike_count: int
    ) -> Optional[Comment]:
        """Overwrite the like/dislike counters.

        Returns:
            The updated comment, or None if it does not exist
        """
        pass

    @abstractmethod
    async def update_sort_orders(self, sort_orders: Mapping[CommentId, Decimal]) -> None:
        """Rewrite the sort keys of several comments in one statement.

        Args:
            sort_orders: New key per comment ID
        """
        pass

    @abstractmethod
    async def find_active_by_scope(
        self, scope: ThreadScope, offset: int = 0, limit: int = 20
    ) -> List[Comment]:
        """Find active comments of a thread in creation order (flat listing)."""
        pass

    @abstractmethod
    async def count_active_by_scope(self, scope: ThreadScope) -> int:
        """Count active comments of a thread."""
        pass

    @abstractmethod
    async def find_by_author(
        self, author_id: UserId, offset: int = 0, limit: int = 20
    ) -> List[Comment]:
        """Find active comments by an author, newest first.

        Args:
            author_id: The author's user ID
            offset: Number of comments to skip
            limit: Maximum number of comments to return

        Returns:
            List of comments by the author
        """
        pass

    @abstractmethod
    async def count_by_pages(
        self, site_key: str, page_ids: Sequence[str]
    ) -> Dict[str, int]:
        """Count active comments for several pages of a site (batch query).

        Returns:
            Count per requested page ID, zero for pages without comments
        """
        pass

    @abstractmethod
    async def count_created_since(
        self, site_keys: Sequence[str], since: datetime
    ) -> int:
        """Count active comments created on the given sites since a moment."""
        pass
