"""List user comments use case."""

from uuid import UUID

from pydantic import BaseModel

from comdeply.config import CommentSettings
from comdeply.domain.service import CommentService
from comdeply.domain.value import UserId

from .views import CommentSummary, page_window, to_summary


class ListUserCommentsRequest(BaseModel):
    """List user comments request."""

    user_id: str  # Authenticated user
    offset: int = 0
    limit: int | None = None


class ListUserCommentsResponse(BaseModel):
    """List user comments response."""

    comments: list[CommentSummary]
    offset: int
    limit: int


class ListUserCommentsUseCase:
    """Use case for listing a user's own active comments, newest first."""

    def __init__(
        self, comment_service: CommentService, comment_settings: CommentSettings
    ) -> None:
        self.comment_service = comment_service
        self.comment_settings = comment_settings

    async def execute(
        self, request: ListUserCommentsRequest
    ) -> ListUserCommentsResponse:
        offset, limit = page_window(
            request.offset, request.limit, self.comment_settings
        )
        comments = await self.comment_service.list_user_comments(
            UserId(UUID(request.user_id)), offset, limit
        )
        return ListUserCommentsResponse(
            comments=[to_summary(c, self.comment_settings) for c in comments],
            offset=offset,
            limit=limit,
        )
