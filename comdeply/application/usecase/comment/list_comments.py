"""List comments use case (flat view)."""

from uuid import UUID

from pydantic import BaseModel

from comdeply.config import CommentSettings
from comdeply.domain.service import CommentService, JWTService, ReactionService
from comdeply.domain.value import CommentId, ReactionType, ThreadScope, UserId

from .views import CommentSummary, page_window, to_summary


class ListCommentsRequest(BaseModel):
    """List comments request."""

    site_key: str
    page_id: str
    offset: int = 0
    limit: int | None = None
    auth_token: str | None = None


class ListCommentsResponse(BaseModel):
    """List comments response."""

    site_key: str
    page_id: str
    comments: list[CommentSummary]
    total: int
    offset: int
    limit: int


class ListCommentsUseCase:
    """Use case for listing a thread's active comments in creation order."""

    def __init__(
        self,
        comment_service: CommentService,
        reaction_service: ReactionService,
        jwt_service: JWTService,
        comment_settings: CommentSettings,
    ) -> None:
        self.comment_service = comment_service
        self.reaction_service = reaction_service
        self.jwt_service = jwt_service
        self.comment_settings = comment_settings

    async def execute(self, request: ListCommentsRequest) -> ListCommentsResponse:
        offset, limit = page_window(
            request.offset, request.limit, self.comment_settings
        )
        scope = ThreadScope(site_key=request.site_key, page_id=request.page_id)
        comments, total = await self.comment_service.list_comments(
            scope, offset, limit
        )

        reactions: dict[CommentId, ReactionType] = {}
        viewer_id = self.jwt_service.get_user_id_from_token(request.auth_token)
        if viewer_id and comments:
            reactions = await self.reaction_service.get_user_reactions(
                UserId(UUID(viewer_id)), [c.id for c in comments]
            )

        return ListCommentsResponse(
            site_key=scope.site_key,
            page_id=scope.page_id,
            comments=[
                to_summary(c, self.comment_settings, reactions.get(c.id))
                for c in comments
            ],
            total=total,
            offset=offset,
            limit=limit,
        )
