"""Update comment status use case."""

from uuid import UUID

from pydantic import BaseModel

from comdeply.application.usecase.base import BaseUseCase
from comdeply.application.usecase.comment.views import CommentSummary, to_summary
from comdeply.config import CommentSettings
from comdeply.domain.service import CommentService
from comdeply.domain.value import CommentId, CommentStatus


class UpdateCommentStatusRequest(BaseModel):
    """Update comment status request."""

    comment_id: str  # UUID string
    status: CommentStatus


class UpdateCommentStatusResponse(BaseModel):
    """Update comment status response."""

    comment: CommentSummary


class UpdateCommentStatusUseCase(BaseUseCase):
    """Use case for approving or rejecting a comment."""

    def __init__(
        self, comment_service: CommentService, comment_settings: CommentSettings
    ) -> None:
        self.comment_service = comment_service
        self.comment_settings = comment_settings

    async def execute(
        self, request: UpdateCommentStatusRequest
    ) -> UpdateCommentStatusResponse:
        """Execute update status flow.

        Raises:
            CommentNotFoundError: If the comment does not exist
            CannotEditDeletedError: If the comment is deleted
        """
        comment = await self.comment_service.update_status(
            CommentId(UUID(request.comment_id)), request.status
        )
        return UpdateCommentStatusResponse(
            comment=to_summary(comment, self.comment_settings)
        )
