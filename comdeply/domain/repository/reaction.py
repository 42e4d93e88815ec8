"""Reaction repository interface."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from comdeply.domain.model.reaction import Reaction
from comdeply.domain.value import CommentId, ReactionType, UserId


class ReactionRepository(ABC):
    """Repository for Reaction entity.

    Defines the contract for reaction persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_comment_and_user(
        self, comment_id: CommentId, user_id: UserId, for_update: bool = False
    ) -> Optional[Reaction]:
        """Find a user's reaction on a comment.

        Args:
            comment_id: ID of the comment
            user_id: The user's ID
            for_update: Lock the row until the transaction ends

        Returns:
            The reaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_user_and_comments(
        self, user_id: UserId, comment_ids: Sequence[CommentId]
    ) -> List[Reaction]:
        """Find a user's reactions on multiple comments (batch query).

        Args:
            user_id: The user's ID
            comment_ids: Comment IDs to check

        Returns:
            Reactions by the user on the specified comments
        """
        pass

    @abstractmethod
    async def count_by_comment(self, comment_id: CommentId) -> Dict[ReactionType, int]:
        """Count reactions of each type on a comment.

        Returns:
            Count per reaction type, zero for types without reactions
        """
        pass

    @abstractmethod
    async def save(self, reaction: Reaction) -> Reaction:
        """Save a new reaction.

        Args:
            reaction: The reaction to save

        Returns:
            The saved reaction

        Raises:
            IntegrityError: If the user already reacted to the comment
        """
        pass

    @abstractmethod
    async def update_type(
        self, comment_id: CommentId, user_id: UserId, reaction_type: ReactionType
    ) -> Optional[Reaction]:
        """Flip an existing reaction to another type.

        Only a reaction of a different type is changed.

        Returns:
            The updated reaction, or None if no reaction of another type existed
        """
        pass

    @abstractmethod
    async def delete(
        self,
        comment_id: CommentId,
        user_id: UserId,
        reaction_type: Optional[ReactionType] = None,
    ) -> bool:
        """Delete a user's reaction on a comment.

        Args:
            comment_id: ID of the comment
            user_id: The user's ID
            reaction_type: Only delete a reaction of this type, if given

        Returns:
            True if a reaction was deleted, False if none matched
        """
        pass
