"""Comment count use cases."""

from pydantic import BaseModel, Field

from comdeply.domain.service import CommentService
from comdeply.domain.value import ThreadScope


class GetCommentCountRequest(BaseModel):
    """Single page count request."""

    site_key: str
    page_id: str


class GetCommentCountResponse(BaseModel):
    """Single page count response."""

    site_key: str
    page_id: str
    count: int


class GetCommentCountsRequest(BaseModel):
    """Batch count request."""

    site_key: str
    page_ids: list[str] = Field(max_length=100)


class GetCommentCountsResponse(BaseModel):
    """Batch count response."""

    site_key: str
    counts: dict[str, int]


class GetCommentCountUseCase:
    """Use case for counting a page's active comments."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: GetCommentCountRequest) -> GetCommentCountResponse:
        scope = ThreadScope(site_key=request.site_key, page_id=request.page_id)
        count = await self.comment_service.count_comments(scope)
        return GetCommentCountResponse(
            site_key=request.site_key, page_id=request.page_id, count=count
        )


class GetCommentCountsUseCase:
    """Use case for counting active comments on many pages of a site at once."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(
        self, request: GetCommentCountsRequest
    ) -> GetCommentCountsResponse:
        # Duplicate page IDs collapse, order is kept
        page_ids = list(dict.fromkeys(request.page_ids))
        counts = await self.comment_service.count_comments_by_page(
            request.site_key, page_ids
        )
        return GetCommentCountsResponse(site_key=request.site_key, counts=counts)
