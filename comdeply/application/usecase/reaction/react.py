"""React use case."""

from uuid import UUID

from pydantic import BaseModel

from comdeply.domain.service import ReactionService
from comdeply.domain.value import CommentId, ReactionType, UserId


class ReactRequest(BaseModel):
    """React request."""

    comment_id: str  # UUID string
    user_id: str  # User ID from authenticated user
    reaction_type: ReactionType


class ReactResponse(BaseModel):
    """React response.

    ``viewer_reaction`` is the caller's reaction after the toggle, None when
    the same reaction was sent twice and therefore removed.
    """

    comment_id: str
    like_count: int
    dislike_count: int
    viewer_reaction: ReactionType | None


class ReactUseCase:
    """Use case for toggling a like or dislike on a comment."""

    def __init__(self, reaction_service: ReactionService) -> None:
        """Initialize react use case.

        Args:
            reaction_service: Reaction domain service
        """
        self.reaction_service = reaction_service

    async def execute(self, request: ReactRequest) -> ReactResponse:
        """Execute react flow.

        Raises:
            CommentNotFoundError: If the comment does not exist
            CannotEditDeletedError: If the comment is deleted
            ReactionConflictError: If a concurrent reaction keeps colliding
        """
        comment_id = CommentId(UUID(request.comment_id))
        user_id = UserId(UUID(request.user_id))

        comment = await self.reaction_service.react(
            comment_id, user_id, request.reaction_type
        )
        reactions = await self.reaction_service.get_user_reactions(
            user_id, [comment_id]
        )

        return ReactResponse(
            comment_id=str(comment.id),
            like_count=comment.like_count,
            dislike_count=comment.dislike_count,
            viewer_reaction=reactions.get(comment_id),
        )
