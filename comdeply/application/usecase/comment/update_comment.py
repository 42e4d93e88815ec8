"""Update comment use case."""

from uuid import UUID

from pydantic import BaseModel

from comdeply.config import CommentSettings
from comdeply.domain.service import CommentService, ReactionService
from comdeply.domain.value import CommentId, UserId

from .views import CommentSummary, to_summary


class UpdateCommentRequest(BaseModel):
    """Update comment request."""

    comment_id: str  # UUID string
    user_id: str  # Current user ID (must be author)
    content: str  # New content (required, cannot be empty)


class UpdateCommentResponse(BaseModel):
    """Update comment response."""

    comment: CommentSummary


class UpdateCommentUseCase:
    """Use case for editing a comment's content."""

    def __init__(
        self,
        comment_service: CommentService,
        reaction_service: ReactionService,
        comment_settings: CommentSettings,
    ) -> None:
        """Initialize update comment use case.

        Args:
            comment_service: Comment service
            reaction_service: Reaction service (caller's own reaction)
            comment_settings: Comment settings
        """
        self.comment_service = comment_service
        self.reaction_service = reaction_service
        self.comment_settings = comment_settings

    async def execute(self, request: UpdateCommentRequest) -> UpdateCommentResponse:
        """Execute update comment flow.

        Args:
            request: Update comment request with comment ID, user ID and content

        Returns:
            Updated comment

        Raises:
            CommentNotFoundError: If the comment does not exist
            NotOwnerError: If the user did not write the comment
            CannotEditDeletedError: If the comment is deleted
        """
        comment_id = CommentId(UUID(request.comment_id))
        user_id = UserId(UUID(request.user_id))

        updated = await self.comment_service.edit_comment(
            comment_id, request.content, user_id
        )
        reactions = await self.reaction_service.get_user_reactions(
            user_id, [comment_id]
        )

        return UpdateCommentResponse(
            comment=to_summary(
                updated, self.comment_settings, reactions.get(comment_id)
            )
        )
