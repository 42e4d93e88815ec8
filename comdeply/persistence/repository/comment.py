"""PostgreSQL implementation of Comment repository."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy import and_, bindparam, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from comdeply.domain.model import Comment
from comdeply.domain.repository import CommentRepository
from comdeply.domain.value import CommentId, CommentState, ThreadScope, UserId
from comdeply.persistence.mappers import comment_to_dict, row_to_comment
from comdeply.persistence.tables import comments_table
from comdeply.util.clock import utc_now

_DEAD = CommentState.DELETED_LEAF.value
_ACTIVE = CommentState.ACTIVE.value


def _in_scope(scope: ThreadScope) -> Any:
    return and_(
        comments_table.c.site_key == scope.site_key,
        comments_table.c.page_id == scope.page_id,
    )


def _sibling_of(parent_id: Optional[CommentId]) -> Any:
    if parent_id is None:
        return comments_table.c.parent_id.is_(None)
    return comments_table.c.parent_id == parent_id


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(comments_table.c.id == comment_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def find_by_scope(
        self, scope: ThreadScope, include_dead: bool = False
    ) -> List[Comment]:
        """Find every comment of a thread ordered by sort key."""
        stmt = select(comments_table).where(_in_scope(scope))

        if not include_dead:
            stmt = stmt.where(comments_table.c.state != _DEAD)

        stmt = stmt.order_by(comments_table.c.sort_order, comments_table.c.created_at)

        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def find_roots(
        self, scope: ThreadScope, offset: int = 0, limit: int = 20
    ) -> List[Comment]:
        """Find a page of visible root comments ordered by sort key."""
        stmt = (
            select(comments_table)
            .where(_in_scope(scope))
            .where(comments_table.c.parent_id.is_(None))
            .where(comments_table.c.state != _DEAD)
            .order_by(comments_table.c.sort_order, comments_table.c.created_at)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def count_roots(self, scope: ThreadScope) -> int:
        """Count visible root comments of a thread."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(_in_scope(scope))
            .where(comments_table.c.parent_id.is_(None))
            .where(comments_table.c.state != _DEAD)
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def find_children(
        self, parent_id: CommentId, include_dead: bool = False
    ) -> List[Comment]:
        """Find direct replies of a comment ordered by sort key."""
        stmt = select(comments_table).where(comments_table.c.parent_id == parent_id)

        if not include_dead:
            stmt = stmt.where(comments_table.c.state != _DEAD)

        stmt = stmt.order_by(comments_table.c.sort_order, comments_table.c.created_at)

        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def has_living_children(self, parent_id: CommentId) -> bool:
        """Check whether a comment has any reply that is not DELETED_LEAF."""
        stmt = select(
            select(comments_table.c.id)
            .where(comments_table.c.parent_id == parent_id)
            .where(comments_table.c.state != _DEAD)
            .exists()
        )
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def find_max_sort_order(
        self, scope: ThreadScope, parent_id: Optional[CommentId] = None
    ) -> Optional[Decimal]:
        """Find the largest sort key among siblings (deleted included)."""
        stmt = (
            select(func.max(comments_table.c.sort_order))
            .where(_in_scope(scope))
            .where(_sibling_of(parent_id))
        )
        result = await self.session.execute(stmt)
        return result.scalar()

    async def acquire_sort_lock(
        self, scope: ThreadScope, parent_id: Optional[CommentId] = None
    ) -> None:
        """Take a transaction-scoped advisory lock on a sibling group."""
        lock_key = f"{scope}:{parent_id or 'root'}"
        await self.session.execute(
            select(func.pg_advisory_xact_lock(func.hashtext(lock_key)))
        )

    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update)."""
        existing = await self.find_by_id(comment.id)
        comment_dict = comment_to_dict(comment)

        if existing:
            stmt = (
                update(comments_table)
                .where(comments_table.c.id == comment.id)
                .values(**comment_dict)
            )
            await self.session.execute(stmt)
            await self.session.flush()
            return comment

        # Savepoint so a sort key collision leaves the transaction usable
        async with self.session.begin_nested():
            await self.session.execute(comments_table.insert().values(**comment_dict))
        return comment

    async def _update_returning(
        self, comment_id: CommentId, values: Dict[str, Any]
    ) -> Optional[Comment]:
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .values(**values, updated_at=utc_now())
            .returning(comments_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()

        if row is None:
            return None

        await self.session.flush()
        return row_to_comment(row._asdict())

    async def adjust_reaction_counts(
        self, comment_id: CommentId, like_delta: int, dislike_delta: int
    ) -> Optional[Comment]:
        """Atomically move the like/dislike counters, never below zero."""
        return await self._update_returning(
            comment_id,
            {
                "like_count": func.greatest(comments_table.c.like_count + like_delta, 0),
                "dislike_count": func.greatest(
                    comments_table.c.dislike_count + dislike_delta, 0
                ),
            },
        )

    async def set_reaction_counts(
        self, comment_id: CommentId, like_count: int, dislike_count: int
    ) -> Optional[Comment]:
        """Overwrite the like/dislike counters."""
        return await self._update_returning(
            comment_id, {"like_count": like_count, "dislike_count": dislike_count}
        )

    async def update_sort_orders(self, sort_orders: Mapping[CommentId, Decimal]) -> None:
        """Rewrite the sort keys of several comments in one executemany."""
        if not sort_orders:
            return
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == bindparam("target_id"))
            .values(sort_order=bindparam("new_sort_order"))
        )
        await self.session.execute(
            stmt,
            [
                {"target_id": comment_id, "new_sort_order": sort_order}
                for comment_id, sort_order in sort_orders.items()
            ],
        )
        await self.session.flush()

    async def find_active_by_scope(
        self, scope: ThreadScope, offset: int = 0, limit: int = 20
    ) -> List[Comment]:
        """Find active comments of a thread in creation order."""
        stmt = (
            select(comments_table)
            .where(_in_scope(scope))
            .where(comments_table.c.state == _ACTIVE)
            .order_by(comments_table.c.created_at, comments_table.c.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def count_active_by_scope(self, scope: ThreadScope) -> int:
        """Count active comments of a thread."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(_in_scope(scope))
            .where(comments_table.c.state == _ACTIVE)
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def find_by_author(
        self, author_id: UserId, offset: int = 0, limit: int = 20
    ) -> List[Comment]:
        """Find active comments by an author, newest first."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.author_id == author_id)
            .where(comments_table.c.state == _ACTIVE)
            .order_by(desc(comments_table.c.created_at))
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def count_by_pages(
        self, site_key: str, page_ids: Sequence[str]
    ) -> Dict[str, int]:
        """Count active comments for several pages of a site."""
        counts = {page_id: 0 for page_id in page_ids}
        if not counts:
            return counts

        stmt = (
            select(comments_table.c.page_id, func.count())
            .where(comments_table.c.site_key == site_key)
            .where(comments_table.c.page_id.in_(list(counts)))
            .where(comments_table.c.state == _ACTIVE)
            .group_by(comments_table.c.page_id)
        )
        result = await self.session.execute(stmt)
        for page_id, count in result.fetchall():
            counts[page_id] = count
        return counts

    async def count_created_since(
        self, site_keys: Sequence[str], since: datetime
    ) -> int:
        """Count active comments created on the given sites since a moment."""
        if not site_keys:
            return 0
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(comments_table.c.site_key.in_(list(site_keys)))
            .where(comments_table.c.state == _ACTIVE)
            .where(comments_table.c.created_at >= since)
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0
