"""Comment domain service."""

from dataclasses import dataclass, field
from typing import Sequence
from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from comdeply.config import CommentSettings
from comdeply.domain.error import (
    AlreadyDeletedError,
    CommentNotFoundError,
    DepthInvariantViolationError,
    NotOwnerError,
    ParentNotFoundError,
    QuotaExceededError,
    SiteInactiveError,
    SiteNotFoundError,
    SortKeyConflictError,
)
from comdeply.domain.model import Comment
from comdeply.domain.repository import CommentRepository, SiteRepository
from comdeply.domain.value import (
    CommentId,
    CommentState,
    CommentStatus,
    ThreadScope,
    UserId,
)
from comdeply.util.clock import utc_now

from .base import Service
from .hierarchy import CommentThread, HierarchyBuilder
from .quota import QuotaChecker
from .sort_key import SortKeyAssigner


@dataclass
class CommentDeletion:
    """Outcome of a soft delete.

    ``pruned`` lists the comments that became structurally dead, starting
    with the deleted comment itself when it had no living replies.
    """

    comment: Comment
    pruned: list[CommentId] = field(default_factory=list)


class CommentService(Service):
    """Domain service for the comment lifecycle.

    Creates comments (depth clamp and sort key), edits them, soft-deletes
    them with cascading cleanup of dead branches, and serves thread reads.
    """

    def __init__(
        self,
        comment_repository: CommentRepository,
        site_repository: SiteRepository,
        sort_key_assigner: SortKeyAssigner,
        hierarchy_builder: HierarchyBuilder,
        quota_checker: QuotaChecker,
        comment_settings: CommentSettings,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            site_repository: Site repository
            sort_key_assigner: Sort key assigner
            hierarchy_builder: Hierarchy builder
            quota_checker: Quota checker for site owners
            comment_settings: Comment settings
        """
        self.comment_repository = comment_repository
        self.site_repository = site_repository
        self.sort_key_assigner = sort_key_assigner
        self.hierarchy_builder = hierarchy_builder
        self.quota_checker = quota_checker
        self.comment_settings = comment_settings

    async def create_comment(
        self,
        scope: ThreadScope,
        author_id: UserId,
        author_name: str,
        content: str,
        parent_id: CommentId | None = None,
    ) -> Comment:
        """Create a root comment or a reply.

        Steps:
        1. Site must exist and be active
        2. Site owner must be under quota
        3. Parent (if any) must exist in the same thread and not be pruned
        4. Depth is clamped to max_depth; the reply still nests under its
           real parent
        5. Sort key is assigned under the sibling-group lock; a key
           collision is retried once with a fresh key

        Args:
            scope: Thread to post in
            author_id: Author user ID
            author_name: Author display name
            content: Comment content
            parent_id: Comment being replied to (None for roots)

        Returns:
            Created comment

        Raises:
            SiteNotFoundError: If the site does not exist
            SiteInactiveError: If the site is deactivated
            QuotaExceededError: If the owner's quota is used up
            ParentNotFoundError: If the parent is missing or pruned
            SortKeyConflictError: If the key still collides after a retry
        """
        with logfire.span(
            "comment_service.create_comment",
            scope=str(scope),
            author_id=str(author_id),
            parent_id=str(parent_id) if parent_id else None,
        ):
            site = await self.site_repository.find_by_key(scope.site_key)
            if site is None:
                logfire.warn("Comment on unknown site", site_key=scope.site_key)
                raise SiteNotFoundError(scope.site_key)
            if not site.is_active:
                logfire.warn("Comment on inactive site", site_key=scope.site_key)
                raise SiteInactiveError(scope.site_key)

            if not await self.quota_checker.allow_new_comment(site.owner_id):
                raise QuotaExceededError(str(site.owner_id))

            parent: Comment | None = None
            depth = 1
            if parent_id:
                parent = await self._resolve_parent(scope, parent_id)
                depth = self._reply_depth(parent)

            try:
                saved = await self._insert_with_fresh_key(
                    scope, author_id, author_name, content, parent, depth
                )
            except IntegrityError:
                logfire.warn(
                    "Sort key conflict, retrying with a fresh key",
                    scope=str(scope),
                    parent_id=str(parent_id) if parent_id else None,
                )
                try:
                    saved = await self._insert_with_fresh_key(
                        scope, author_id, author_name, content, parent, depth
                    )
                except IntegrityError as e:
                    logfire.error(
                        "Sort key conflict persisted after retry",
                        scope=str(scope),
                        parent_id=str(parent_id) if parent_id else None,
                    )
                    raise SortKeyConflictError(
                        f"Could not assign a unique sort key in {scope}"
                    ) from e

            logfire.info(
                "Comment created",
                comment_id=str(saved.id),
                scope=str(scope),
                depth=saved.depth,
                sort_order=str(saved.sort_order),
            )
            return saved

    async def _resolve_parent(self, scope: ThreadScope, parent_id: CommentId) -> Comment:
        parent = await self.comment_repository.find_by_id(parent_id)
        if parent is None or parent.scope != scope:
            logfire.warn(
                "Parent comment not found in thread",
                parent_id=str(parent_id),
                scope=str(scope),
            )
            raise ParentNotFoundError(str(parent_id))
        # Tombstones still accept replies, pruned comments do not
        if parent.state is CommentState.DELETED_LEAF:
            logfire.warn("Reply to pruned comment", parent_id=str(parent_id))
            raise ParentNotFoundError(str(parent_id))
        return parent

    def _reply_depth(self, parent: Comment) -> int:
        max_depth = self.comment_settings.max_depth
        depth = min(parent.depth + 1, max_depth)
        if not 1 <= depth <= max_depth:
            logfire.error(
                "Depth invariant violated",
                parent_id=str(parent.id),
                parent_depth=parent.depth,
                max_depth=max_depth,
            )
            raise DepthInvariantViolationError(depth, max_depth)
        return depth

    async def _insert_with_fresh_key(
        self,
        scope: ThreadScope,
        author_id: UserId,
        author_name: str,
        content: str,
        parent: Comment | None,
        depth: int,
    ) -> Comment:
        parent_id = parent.id if parent else None
        await self.comment_repository.acquire_sort_lock(scope, parent_id)
        if parent is not None:
            # A delete holding the same lock may have pruned the parent meanwhile
            parent = await self._resolve_parent(scope, parent.id)
        sort_order = await self.sort_key_assigner.assign(
            scope,
            parent_id=parent_id,
            parent_sort_order=parent.sort_order if parent else None,
        )

        now = utc_now()
        comment = Comment(
            id=CommentId(uuid4()),
            site_key=scope.site_key,
            page_id=scope.page_id,
            author_id=author_id,
            author_name=author_name,
            content=content,
            parent_id=parent_id,
            depth=depth,
            sort_order=sort_order,
            created_at=now,
            updated_at=now,
        )
        return await self.comment_repository.save(comment)

    async def get_comment(self, comment_id: CommentId) -> Comment | None:
        """Get a comment by ID.

        Args:
            comment_id: Comment ID

        Returns:
            Comment if found, None otherwise
        """
        with logfire.span("comment_service.get_comment", comment_id=str(comment_id)):
            comment = await self.comment_repository.find_by_id(comment_id)
            if comment is None:
                logfire.warn("Comment not found", comment_id=str(comment_id))
            return comment

    async def _get_or_raise(self, comment_id: CommentId) -> Comment:
        comment = await self.get_comment(comment_id)
        if comment is None:
            raise CommentNotFoundError(str(comment_id))
        return comment

    async def edit_comment(
        self, comment_id: CommentId, content: str, requesting_user_id: UserId
    ) -> Comment:
        """Replace the content of a comment.

        Raises:
            CommentNotFoundError: If the comment does not exist
            NotOwnerError: If the requester did not write the comment
            CannotEditDeletedError: If the comment is deleted
        """
        with logfire.span(
            "comment_service.edit_comment",
            comment_id=str(comment_id),
            user_id=str(requesting_user_id),
            content_length=len(content),
        ):
            comment = await self._get_or_raise(comment_id)
            if comment.author_id != requesting_user_id:
                logfire.warn(
                    "Edit attempt by non-owner",
                    comment_id=str(comment_id),
                    user_id=str(requesting_user_id),
                )
                raise NotOwnerError("comment", str(comment_id), str(requesting_user_id))

            saved = await self.comment_repository.save(comment.edit(content))
            logfire.info("Comment edited", comment_id=str(comment_id))
            return saved

    async def update_status(
        self, comment_id: CommentId, status: CommentStatus
    ) -> Comment:
        """Set the moderation status of a comment (administrators only).

        Raises:
            CommentNotFoundError: If the comment does not exist
            CannotEditDeletedError: If the comment is deleted
        """
        with logfire.span(
            "comment_service.update_status",
            comment_id=str(comment_id),
            status=status.value,
        ):
            comment = await self._get_or_raise(comment_id)
            saved = await self.comment_repository.save(comment.with_status(status))
            logfire.info(
                "Comment status updated", comment_id=str(comment_id), status=status.value
            )
            return saved

    async def delete_comment(
        self, comment_id: CommentId, requesting_user_id: UserId
    ) -> CommentDeletion:
        """Soft-delete a comment on behalf of its author.

        Raises:
            CommentNotFoundError: If the comment does not exist
            NotOwnerError: If the requester did not write the comment
            AlreadyDeletedError: If the comment is already deleted
        """
        with logfire.span(
            "comment_service.delete_comment",
            comment_id=str(comment_id),
            user_id=str(requesting_user_id),
        ):
            comment = await self._get_or_raise(comment_id)
            if comment.author_id != requesting_user_id:
                logfire.warn(
                    "Delete attempt by non-owner",
                    comment_id=str(comment_id),
                    user_id=str(requesting_user_id),
                )
                raise NotOwnerError("comment", str(comment_id), str(requesting_user_id))
            return await self._soft_delete(
                comment, self.comment_settings.deleted_placeholder
            )

    async def admin_delete_comment(self, comment_id: CommentId) -> CommentDeletion:
        """Soft-delete any comment (administrators only).

        Same mechanics as ``delete_comment`` without the ownership check.
        """
        with logfire.span(
            "comment_service.admin_delete_comment", comment_id=str(comment_id)
        ):
            comment = await self._get_or_raise(comment_id)
            return await self._soft_delete(
                comment, self.comment_settings.admin_deleted_placeholder
            )

    async def _soft_delete(self, comment: Comment, placeholder: str) -> CommentDeletion:
        # Replies to this comment are inserted under the same lock
        await self.comment_repository.acquire_sort_lock(comment.scope, comment.id)
        comment = await self._get_or_raise(comment.id)
        if comment.is_deleted:
            logfire.warn("Comment already deleted", comment_id=str(comment.id))
            raise AlreadyDeletedError("comment", str(comment.id))

        if await self.comment_repository.has_living_children(comment.id):
            saved = await self.comment_repository.save(comment.tombstone(placeholder))
            logfire.info("Comment tombstoned", comment_id=str(comment.id))
            return CommentDeletion(comment=saved)

        saved = await self.comment_repository.save(comment.mark_dead())
        pruned = await self.cascade_cleanup(saved)
        logfire.info(
            "Comment deleted", comment_id=str(comment.id), pruned_count=len(pruned)
        )
        return CommentDeletion(comment=saved, pruned=pruned)

    async def cascade_cleanup(self, comment: Comment) -> list[CommentId]:
        """Propagate structural death up the ancestor chain.

        Starting from a DELETED_LEAF comment, walks to its parent: a deleted
        parent with no other living reply is itself dead (a tombstone is
        moved to DELETED_LEAF) and becomes the next step. The walk stops at
        the first ancestor that is active or still has a living reply, at
        the root, or at an ancestor that has vanished.

        Each hop takes the lock replies to the parent are inserted under,
        then re-reads the parent and its replies instead of trusting an
        earlier snapshot. A seen-set bounds the walk: depth saturates at
        max_depth while nesting does not, so depth cannot bound it.

        Args:
            comment: The comment that just became DELETED_LEAF

        Returns:
            IDs of the dead comments along the chain, starting with ``comment``
        """
        if comment.state is not CommentState.DELETED_LEAF:
            return []

        with logfire.span("comment_service.cascade_cleanup", comment_id=str(comment.id)):
            pruned = [comment.id]
            seen = {comment.id}
            current = comment

            while current.parent_id is not None:
                parent = await self.comment_repository.find_by_id(current.parent_id)
                if parent is None:
                    logfire.info(
                        "Cascade stopped at vanished ancestor",
                        parent_id=str(current.parent_id),
                    )
                    break
                if parent.id in seen:
                    logfire.warn("Cycle in comment ancestry", comment_id=str(parent.id))
                    break
                seen.add(parent.id)

                if not parent.is_deleted:
                    break
                await self.comment_repository.acquire_sort_lock(parent.scope, parent.id)
                parent = await self.comment_repository.find_by_id(parent.id)
                if parent is None or not parent.is_deleted:
                    break
                if await self.comment_repository.has_living_children(parent.id):
                    break

                if parent.state is CommentState.DELETED_WITH_DESCENDANTS:
                    parent = await self.comment_repository.save(parent.mark_dead())
                pruned.append(parent.id)
                current = parent

            logfire.debug("Cascade finished", pruned=[str(cid) for cid in pruned])
            return pruned

    async def get_thread(
        self, scope: ThreadScope, offset: int = 0, limit: int = 20
    ) -> CommentThread:
        """Get one page of a thread as a tree.

        Roots are paginated; the whole visible thread is fetched once and
        the page's subtrees are attached in memory.

        Args:
            scope: The thread
            offset: Number of roots to skip
            limit: Maximum number of roots

        Returns:
            Root nodes with their replies, plus the total number of roots
        """
        with logfire.span(
            "comment_service.get_thread", scope=str(scope), offset=offset, limit=limit
        ):
            roots = await self.comment_repository.find_roots(scope, offset, limit)
            total_roots = await self.comment_repository.count_roots(scope)
            if not roots:
                return CommentThread(roots=[], total_roots=total_roots)

            visible = await self.comment_repository.find_by_scope(scope)
            tree = self.hierarchy_builder.build(visible, roots=roots)
            logfire.info(
                "Thread retrieved",
                scope=str(scope),
                root_count=len(tree),
                comment_count=len(visible),
            )
            return CommentThread(roots=tree, total_roots=total_roots)

    async def list_comments(
        self, scope: ThreadScope, offset: int = 0, limit: int = 20
    ) -> tuple[list[Comment], int]:
        """Get active comments of a thread as a flat list in creation order.

        Returns:
            The page of comments and the total number of active comments
        """
        with logfire.span(
            "comment_service.list_comments", scope=str(scope), offset=offset, limit=limit
        ):
            comments = await self.comment_repository.find_active_by_scope(
                scope, offset, limit
            )
            total = await self.comment_repository.count_active_by_scope(scope)
            return comments, total

    async def list_user_comments(
        self, author_id: UserId, offset: int = 0, limit: int = 20
    ) -> list[Comment]:
        """Get a user's active comments, newest first."""
        with logfire.span(
            "comment_service.list_user_comments", author_id=str(author_id)
        ):
            return await self.comment_repository.find_by_author(author_id, offset, limit)

    async def count_comments(self, scope: ThreadScope) -> int:
        """Count active comments of a thread."""
        return await self.comment_repository.count_active_by_scope(scope)

    async def count_comments_by_page(
        self, site_key: str, page_ids: Sequence[str]
    ) -> dict[str, int]:
        """Count active comments for several pages of a site."""
        if not page_ids:
            return {}
        with logfire.span(
            "comment_service.count_comments_by_page",
            site_key=site_key,
            page_count=len(page_ids),
        ):
            return await self.comment_repository.count_by_pages(site_key, page_ids)
