"""PostgreSQL implementation of Reaction repository."""

from typing import Dict, List, Optional, Sequence

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from comdeply.domain.model import Reaction
from comdeply.domain.repository import ReactionRepository
from comdeply.domain.value import CommentId, ReactionType, UserId
from comdeply.persistence.mappers import reaction_to_dict, row_to_reaction
from comdeply.persistence.tables import comment_reactions_table
from comdeply.util.clock import utc_now


class PostgresReactionRepository(ReactionRepository):
    """PostgreSQL implementation of ReactionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_comment_and_user(
        self, comment_id: CommentId, user_id: UserId, for_update: bool = False
    ) -> Optional[Reaction]:
        """Find a user's reaction on a comment, optionally locking the row."""
        stmt = select(comment_reactions_table).where(
            and_(
                comment_reactions_table.c.comment_id == comment_id,
                comment_reactions_table.c.user_id == user_id,
            )
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_reaction(row._asdict()) if row else None

    async def find_by_user_and_comments(
        self, user_id: UserId, comment_ids: Sequence[CommentId]
    ) -> List[Reaction]:
        """Find a user's reactions on multiple comments (batch query)."""
        if not comment_ids:
            return []

        stmt = select(comment_reactions_table).where(
            and_(
                comment_reactions_table.c.user_id == user_id,
                comment_reactions_table.c.comment_id.in_(list(comment_ids)),
            )
        )
        result = await self.session.execute(stmt)
        return [row_to_reaction(row._asdict()) for row in result.fetchall()]

    async def count_by_comment(self, comment_id: CommentId) -> Dict[ReactionType, int]:
        """Count reactions of each type on a comment."""
        counts = {reaction_type: 0 for reaction_type in ReactionType}
        stmt = (
            select(comment_reactions_table.c.reaction_type, func.count())
            .where(comment_reactions_table.c.comment_id == comment_id)
            .group_by(comment_reactions_table.c.reaction_type)
        )
        result = await self.session.execute(stmt)
        for reaction_type, count in result.fetchall():
            counts[ReactionType(reaction_type)] = count
        return counts

    async def save(self, reaction: Reaction) -> Reaction:
        """Save a new reaction."""
        reaction_dict = reaction_to_dict(reaction)
        # Savepoint so a concurrent duplicate leaves the transaction usable
        async with self.session.begin_nested():
            await self.session.execute(
                insert(comment_reactions_table).values(**reaction_dict)
            )
        return reaction

    async def update_type(
        self, comment_id: CommentId, user_id: UserId, reaction_type: ReactionType
    ) -> Optional[Reaction]:
        """Flip an existing reaction of another type."""
        stmt = (
            update(comment_reactions_table)
            .where(
                and_(
                    comment_reactions_table.c.comment_id == comment_id,
                    comment_reactions_table.c.user_id == user_id,
                    comment_reactions_table.c.reaction_type != reaction_type.value,
                )
            )
            .values(reaction_type=reaction_type.value, updated_at=utc_now())
            .returning(comment_reactions_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()

        if row is None:
            return None

        await self.session.flush()
        return row_to_reaction(row._asdict())

    async def delete(
        self,
        comment_id: CommentId,
        user_id: UserId,
        reaction_type: Optional[ReactionType] = None,
    ) -> bool:
        """Delete a user's reaction on a comment."""
        stmt = delete(comment_reactions_table).where(
            and_(
                comment_reactions_table.c.comment_id == comment_id,
                comment_reactions_table.c.user_id == user_id,
            )
        )
        if reaction_type is not None:
            stmt = stmt.where(
                comment_reactions_table.c.reaction_type == reaction_type.value
            )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined]
