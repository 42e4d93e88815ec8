"""Sort key assignment for new comments."""

from decimal import Decimal
from typing import Optional

import logfire

from comdeply.domain.error import ParentNotFoundError
from comdeply.domain.repository import CommentRepository
from comdeply.domain.value import CommentId, ThreadScope

from .base import Service

ROOT_STEP = Decimal("1")
FIRST_CHILD_OFFSET = Decimal("0.1")
SIBLING_STEP = Decimal("0.01")


class SortKeyAssigner(Service):
    """Computes the ordering key of a comment about to be created.

    Keys are append-only within a sibling group:

    - roots: 1, 2, 3, ...
    - first reply: parent key + 0.1
    - later replies: largest sibling key + 0.01

    Keys of deleted siblings stay reserved, so a key is never handed out
    twice within a group. Callers must hold the sibling-group lock (see
    ``CommentRepository.acquire_sort_lock``) between assigning and saving.
    """

    def __init__(self, comment_repository: CommentRepository) -> None:
        """Initialize sort key assigner.

        Args:
            comment_repository: Comment repository
        """
        self.comment_repository = comment_repository

    async def assign(
        self,
        scope: ThreadScope,
        parent_id: Optional[CommentId] = None,
        parent_sort_order: Optional[Decimal] = None,
    ) -> Decimal:
        """Compute the sort key for a new comment.

        Args:
            scope: Thread the comment is created in
            parent_id: Comment being replied to (None for roots)
            parent_sort_order: Key of the parent, looked up if omitted

        Returns:
            The new sort key

        Raises:
            ParentNotFoundError: If the parent key is needed but the parent is gone
        """
        with logfire.span(
            "sort_key_assigner.assign",
            scope=str(scope),
            parent_id=str(parent_id) if parent_id else None,
        ):
            current_max = await self.comment_repository.find_max_sort_order(
                scope, parent_id
            )

            if parent_id is None:
                key = (current_max or Decimal(0)) + ROOT_STEP
            elif current_max is not None:
                key = current_max + SIBLING_STEP
            else:
                if parent_sort_order is None:
                    parent = await self.comment_repository.find_by_id(parent_id)
                    if parent is None:
                        raise ParentNotFoundError(str(parent_id))
                    parent_sort_order = parent.sort_order
                key = parent_sort_order + FIRST_CHILD_OFFSET

            logfire.debug("Sort key assigned", sort_order=str(key))
            return key
