"""Create comment use case."""

from uuid import UUID

from pydantic import BaseModel

from comdeply.config import CommentSettings
from comdeply.domain.service import CommentService
from comdeply.domain.value import CommentId, ThreadScope, UserId

from .views import CommentSummary, to_summary


class CreateCommentRequest(BaseModel):
    """Create comment request."""

    site_key: str
    page_id: str
    content: str
    author_id: str  # User ID from authenticated user
    author_name: str  # Display name from authenticated user
    parent_id: str | None = None  # Parent comment ID for replies


class CreateCommentResponse(BaseModel):
    """Create comment response."""

    comment: CommentSummary


class CreateCommentUseCase:
    """Use case for posting a comment on a page or replying to another comment."""

    def __init__(
        self, comment_service: CommentService, comment_settings: CommentSettings
    ) -> None:
        """Initialize create comment use case.

        Args:
            comment_service: Comment domain service
            comment_settings: Comment settings (redaction placeholders)
        """
        self.comment_service = comment_service
        self.comment_settings = comment_settings

    async def execute(self, request: CreateCommentRequest) -> CreateCommentResponse:
        """Execute create comment flow.

        The service checks the site and quota, clamps the depth and assigns
        the sort key.

        Args:
            request: Create comment request

        Returns:
            Create comment response with the new comment
        """
        parent_id = CommentId(UUID(request.parent_id)) if request.parent_id else None
        comment = await self.comment_service.create_comment(
            scope=ThreadScope(site_key=request.site_key, page_id=request.page_id),
            author_id=UserId(UUID(request.author_id)),
            author_name=request.author_name,
            content=request.content,
            parent_id=parent_id,
        )
        return CreateCommentResponse(
            comment=to_summary(comment, self.comment_settings)
        )
