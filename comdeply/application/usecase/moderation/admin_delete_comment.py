"""Administrator delete comment use case."""

from uuid import UUID

from pydantic import BaseModel

from comdeply.application.usecase.base import BaseUseCase
from comdeply.application.usecase.comment.delete_comment import (
    DeleteCommentResponse,
)
from comdeply.domain.service import CommentService
from comdeply.domain.value import CommentId


class AdminDeleteCommentRequest(BaseModel):
    """Administrator delete comment request."""

    comment_id: str  # UUID string


class AdminDeleteCommentUseCase(BaseUseCase):
    """Use case for removing any comment as an administrator.

    Same lifecycle as an author's delete, with the administrator
    placeholder on tombstones.
    """

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: AdminDeleteCommentRequest) -> DeleteCommentResponse:
        deletion = await self.comment_service.admin_delete_comment(
            CommentId(UUID(request.comment_id))
        )
        return DeleteCommentResponse.from_deletion(deletion)
