"""Delete comment use case."""

from uuid import UUID

from pydantic import BaseModel

from comdeply.domain.service import CommentDeletion, CommentService
from comdeply.domain.value import CommentId, CommentState, UserId


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    comment_id: str  # UUID string
    user_id: str  # Current user ID (must be author)


class DeleteCommentResponse(BaseModel):
    """Delete comment response.

    ``pruned`` lists every comment that became structurally dead, the
    deleted one first. It is empty when the comment was tombstoned.
    """

    comment_id: str
    state: CommentState
    pruned: list[str]

    @classmethod
    def from_deletion(cls, deletion: CommentDeletion) -> "DeleteCommentResponse":
        return cls(
            comment_id=str(deletion.comment.id),
            state=deletion.comment.state,
            pruned=[str(comment_id) for comment_id in deletion.pruned],
        )


class DeleteCommentUseCase:
    """Use case for soft-deleting one's own comment."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize delete comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow.

        Raises:
            CommentNotFoundError: If the comment does not exist
            NotOwnerError: If the user did not write the comment
            AlreadyDeletedError: If the comment is already deleted
        """
        deletion = await self.comment_service.delete_comment(
            CommentId(UUID(request.comment_id)), UserId(UUID(request.user_id))
        )
        return DeleteCommentResponse.from_deletion(deletion)
