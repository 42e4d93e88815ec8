"""Reaction domain service."""


import logfire
from sqlalchemy.exc import IntegrityError

from comdeply.domain.error import (
    CannotEditDeletedError,
    CommentNotFoundError,
    ReactionConflictError,
)
from comdeply.domain.model import Comment, Reaction
from comdeply.domain.repository import CommentRepository, ReactionRepository
from comdeply.domain.value import CommentId, ReactionType, UserId
from comdeply.util.clock import utc_now

from .base import Service


def _deltas(reaction_type: ReactionType, amount: int) -> tuple[int, int]:
    """Counter deltas (likes, dislikes) for moving one reaction of a type."""
    if reaction_type is ReactionType.LIKE:
        return amount, 0
    return 0, amount


class ReactionService(Service):
    """Domain service for like/dislike reactions.

    Each call toggles the user's reaction and moves the comment's
    denormalized counters with atomic SQL increments, so counters always
    match the reaction rows.
    """

    def __init__(
        self,
        reaction_repository: ReactionRepository,
        comment_repository: CommentRepository,
    ) -> None:
        """Initialize reaction service.

        Args:
            reaction_repository: Reaction repository
            comment_repository: Comment repository
        """
        self.reaction_repository = reaction_repository
        self.comment_repository = comment_repository

    async def react(
        self, comment_id: CommentId, user_id: UserId, reaction_type: ReactionType
    ) -> Comment:
        """Toggle a user's reaction on a comment.

        - No prior reaction: add one, increment its counter
        - Same type as before: remove it, decrement its counter
        - Opposite type: flip it, move both counters

        The reaction row is read with a row lock. If it still changes
        underneath the call, the counters are left alone and the call is
        re-applied once against the fresh state.

        Args:
            comment_id: Comment ID
            user_id: User ID
            reaction_type: LIKE or DISLIKE

        Returns:
            The comment with updated counters

        Raises:
            CommentNotFoundError: If the comment does not exist
            CannotEditDeletedError: If the comment is deleted
            ReactionConflictError: If the conflict persists after a retry
        """
        with logfire.span(
            "reaction_service.react",
            comment_id=str(comment_id),
            user_id=str(user_id),
            reaction_type=reaction_type.value,
        ):
            comment = await self.comment_repository.find_by_id(comment_id)
            if comment is None:
                logfire.warn("Reaction on non-existent comment", comment_id=str(comment_id))
                raise CommentNotFoundError(str(comment_id))
            if comment.is_deleted:
                logfire.warn("Reaction on deleted comment", comment_id=str(comment_id))
                raise CannotEditDeletedError("comment", str(comment_id))

            for attempt in range(2):
                try:
                    updated = await self._toggle(comment_id, user_id, reaction_type)
                except IntegrityError as e:
                    if attempt:
                        raise ReactionConflictError(str(comment_id), str(user_id)) from e
                    logfire.warn(
                        "Duplicate reaction insert, re-reading",
                        comment_id=str(comment_id),
                        user_id=str(user_id),
                    )
                    continue
                if updated is not None:
                    return updated
                logfire.warn(
                    "Reaction changed concurrently, re-reading",
                    comment_id=str(comment_id),
                    user_id=str(user_id),
                )
            raise ReactionConflictError(str(comment_id), str(user_id))

    async def _toggle(
        self, comment_id: CommentId, user_id: UserId, reaction_type: ReactionType
    ) -> Comment | None:
        """Apply one toggle; None if the reaction row changed since it was read."""
        existing = await self.reaction_repository.find_by_comment_and_user(
            comment_id, user_id, for_update=True
        )

        if existing is None:
            now = utc_now()
            await self.reaction_repository.save(
                Reaction(
                    comment_id=comment_id,
                    user_id=user_id,
                    reaction_type=reaction_type,
                    created_at=now,
                    updated_at=now,
                )
            )
            like_delta, dislike_delta = _deltas(reaction_type, 1)
            action = "added"
        elif existing.reaction_type is reaction_type:
            if not await self.reaction_repository.delete(
                comment_id, user_id, reaction_type
            ):
                return None
            like_delta, dislike_delta = _deltas(reaction_type, -1)
            action = "removed"
        else:
            flipped = await self.reaction_repository.update_type(
                comment_id, user_id, reaction_type
            )
            if flipped is None:
                return None
            old_like, old_dislike = _deltas(existing.reaction_type, -1)
            new_like, new_dislike = _deltas(reaction_type, 1)
            like_delta, dislike_delta = old_like + new_like, old_dislike + new_dislike
            action = "flipped"

        updated = await self.comment_repository.adjust_reaction_counts(
            comment_id, like_delta, dislike_delta
        )
        if updated is None:
            raise CommentNotFoundError(str(comment_id))

        logfire.info(
            "Reaction toggled",
            comment_id=str(comment_id),
            user_id=str(user_id),
            action=action,
            like_count=updated.like_count,
            dislike_count=updated.dislike_count,
        )
        return updated

    async def get_user_reactions(
        self, user_id: UserId, comment_ids: list[CommentId]
    ) -> dict[CommentId, ReactionType]:
        """Look up a user's reactions on several comments.

        Args:
            user_id: User ID
            comment_ids: Comment IDs to check

        Returns:
            Reaction type per comment the user reacted to
        """
        if not comment_ids:
            return {}

        # Batch query to fetch all reactions at once (avoid N+1)
        reactions = await self.reaction_repository.find_by_user_and_comments(
            user_id, comment_ids
        )
        return {reaction.comment_id: reaction.reaction_type for reaction in reactions}

    async def recount_reactions(self, comment_id: CommentId) -> Comment:
        """Recompute a comment's counters from its reaction rows.

        Raises:
            CommentNotFoundError: If the comment does not exist
        """
        with logfire.span(
            "reaction_service.recount_reactions", comment_id=str(comment_id)
        ):
            counts = await self.reaction_repository.count_by_comment(comment_id)
            updated = await self.comment_repository.set_reaction_counts(
                comment_id,
                like_count=counts.get(ReactionType.LIKE, 0),
                dislike_count=counts.get(ReactionType.DISLIKE, 0),
            )
            if updated is None:
                raise CommentNotFoundError(str(comment_id))
            logfire.info(
                "Reaction counters recomputed",
                comment_id=str(comment_id),
                like_count=updated.like_count,
                dislike_count=updated.dislike_count,
            )
            return updated
