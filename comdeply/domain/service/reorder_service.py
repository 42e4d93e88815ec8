"""Canonical sort key rewriting for whole threads."""

from collections import defaultdict
from decimal import Decimal, localcontext
from typing import Optional

import logfire

from comdeply.config import CommentSettings
from comdeply.domain.error import SortKeyConflictError
from comdeply.domain.model import Comment
from comdeply.domain.repository import CommentRepository
from comdeply.domain.value import CommentId, ThreadScope

from .base import Service

CHILD_STEP = Decimal("0.1")


def _creation_order(comment: Comment) -> tuple:
    return (comment.created_at, str(comment.id))


class ReorderService(Service):
    """Rewrites every sort key of a thread into canonical form.

    Repeated append-only inserts grow keys without bound on busy threads.
    This operation walks the tree depth-first with siblings in creation
    order and assigns:

    - roots: 1, 2, 3, ...
    - a comment at tree level d (roots are level 1) under parent p:
      new_key(p) + (0.1 / 10^(d-1)) * sibling_index

    It is an administrative repair, never part of a user request.
    """

    def __init__(
        self,
        comment_repository: CommentRepository,
        comment_settings: CommentSettings,
    ) -> None:
        """Initialize reorder service.

        Args:
            comment_repository: Comment repository
            comment_settings: Comment settings (batch size)
        """
        self.comment_repository = comment_repository
        self.comment_settings = comment_settings

    def compute_keys(self, comments: list[Comment]) -> dict[CommentId, Decimal]:
        """Compute canonical keys for a thread without touching storage.

        Comments whose parent is not in the set are treated as roots.
        Children use their parent's new key, so the result is canonical no
        matter how far the stored keys drifted.

        Raises:
            SortKeyConflictError: If a child key does not fall strictly inside
                the interval its parent owns (after the parent, before the
                parent's next sibling)
        """
        by_id = {c.id: c for c in comments}
        children: dict[Optional[CommentId], list[Comment]] = defaultdict(list)
        for comment in by_id.values():
            parent_id = comment.parent_id if comment.parent_id in by_id else None
            children[parent_id].append(comment)
        for siblings in children.values():
            siblings.sort(key=_creation_order)

        new_keys: dict[CommentId, Decimal] = {}
        # Exclusive upper bound of the interval each comment owns
        bounds: dict[CommentId, Decimal] = {}
        # Tree level is unbounded, keep every fractional digit it needs
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, len(by_id) + 28)

            stack: list[tuple[CommentId, int]] = []
            for index, root in enumerate(children.get(None, []), start=1):
                new_keys[root.id] = Decimal(index)
                bounds[root.id] = Decimal(index + 1)
                stack.append((root.id, 1))

            while stack:
                parent_id, level = stack.pop()
                parent_key = new_keys[parent_id]
                step = CHILD_STEP.scaleb(-level)
                for index, child in enumerate(children.get(parent_id, []), start=1):
                    key = parent_key + step * index
                    if not parent_key < key < bounds[parent_id]:
                        capacity = int((bounds[parent_id] - parent_key) / step) - 1
                        raise SortKeyConflictError(
                            f"Comment {parent_id} has "
                            f"{len(children[parent_id])} replies but the canonical "
                            f"layout fits at most {capacity} replies per comment "
                            f"at tree level {level + 1}; the thread was left "
                            f"unchanged"
                        )
                    new_keys[child.id] = key
                    bounds[child.id] = key + step
                    stack.append((child.id, level + 1))

        unreached = len(by_id) - len(new_keys)
        if unreached:
            logfire.warn("Comments unreachable from any root", count=unreached)
        return new_keys

    async def reorder_all(self, scope: ThreadScope) -> int:
        """Rewrite the sort keys of a whole thread.

        Every comment is included, tombstones and dead leaves too, since
        their keys occupy the same sibling groups. All keys are computed
        before anything is written; changed rows are first parked on
        negative keys and then moved to their final keys, so the sibling
        uniqueness constraint holds after every statement.

        The canonical layout has room for 99 replies per root and only 9
        replies per comment below that, since each level's step is a tenth
        of its parent's interval. Threads with a more heavily replied
        comment cannot be canonicalized and are refused as a whole.

        Args:
            scope: The thread

        Returns:
            Number of comments whose key changed

        Raises:
            SortKeyConflictError: If canonical keys would leave their parent's
                interval (nothing is written in that case)
        """
        with logfire.span("reorder_service.reorder_all", scope=str(scope)):
            comments = await self.comment_repository.find_by_scope(
                scope, include_dead=True
            )
            current = {c.id: c.sort_order for c in comments}
            new_keys = self.compute_keys(comments)

            changed = {
                comment_id: key
                for comment_id, key in new_keys.items()
                if current[comment_id] != key
            }
            if not changed:
                logfire.info("Thread already canonical", scope=str(scope))
                return 0

            parked = {
                comment_id: Decimal(-index)
                for index, comment_id in enumerate(changed, start=1)
            }
            await self._write_in_batches(parked)
            await self._write_in_batches(changed)

            logfire.info(
                "Thread reordered",
                scope=str(scope),
                comment_count=len(comments),
                changed_count=len(changed),
            )
            return len(changed)

    async def _write_in_batches(self, sort_orders: dict[CommentId, Decimal]) -> None:
        batch_size = self.comment_settings.reorder_batch_size
        items = list(sort_orders.items())
        for start in range(0, len(items), batch_size):
            await self.comment_repository.update_sort_orders(
                dict(items[start : start + batch_size])
            )
