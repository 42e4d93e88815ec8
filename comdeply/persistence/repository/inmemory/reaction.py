"""In-memory reaction repository for testing."""

from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError

from comdeply.domain.model.reaction import Reaction
from comdeply.domain.repository.reaction import ReactionRepository
from comdeply.domain.value import CommentId, ReactionType, UserId
from comdeply.util.clock import utc_now


class InMemoryReactionRepository(ReactionRepository):
    """In-memory implementation of ReactionRepository for testing."""

    def __init__(self) -> None:
        self._reactions: dict[tuple[CommentId, UserId], Reaction] = {}

    async def find_by_comment_and_user(
        self, comment_id: CommentId, user_id: UserId, for_update: bool = False
    ) -> Optional[Reaction]:
        """Find a user's reaction on a comment (no row locks in memory)."""
        return self._reactions.get((comment_id, user_id))

    async def find_by_user_and_comments(
        self, user_id: UserId, comment_ids: Sequence[CommentId]
    ) -> list[Reaction]:
        """Find a user's reactions on multiple comments."""
        wanted = set(comment_ids)
        return [
            r
            for r in self._reactions.values()
            if r.user_id == user_id and r.comment_id in wanted
        ]

    async def count_by_comment(self, comment_id: CommentId) -> dict[ReactionType, int]:
        """Count reactions of each type on a comment."""
        counts = {reaction_type: 0 for reaction_type in ReactionType}
        for r in self._reactions.values():
            if r.comment_id == comment_id:
                counts[r.reaction_type] += 1
        return counts

    async def save(self, reaction: Reaction) -> Reaction:
        """Save a new reaction.

        Raises:
            IntegrityError: If the user already reacted (mimics primary key)
        """
        key = (reaction.comment_id, reaction.user_id)
        if key in self._reactions:
            raise IntegrityError("Duplicate reaction", None, Exception())
        self._reactions[key] = reaction
        return reaction

    async def update_type(
        self, comment_id: CommentId, user_id: UserId, reaction_type: ReactionType
    ) -> Optional[Reaction]:
        """Flip an existing reaction of another type."""
        existing = self._reactions.get((comment_id, user_id))
        if existing is None or existing.reaction_type is reaction_type:
            return None
        updated = existing.model_copy(
            update={"reaction_type": reaction_type, "updated_at": utc_now()}
        )
        self._reactions[(comment_id, user_id)] = updated
        return updated

    async def delete(
        self,
        comment_id: CommentId,
        user_id: UserId,
        reaction_type: Optional[ReactionType] = None,
    ) -> bool:
        """Delete a user's reaction on a comment."""
        existing = self._reactions.get((comment_id, user_id))
        if existing is None:
            return False
        if reaction_type is not None and existing.reaction_type is not reaction_type:
            return False
        del self._reactions[(comment_id, user_id)]
        return True
