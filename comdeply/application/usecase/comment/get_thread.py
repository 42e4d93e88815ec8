"""Get thread use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from comdeply.config import CommentSettings
from comdeply.domain.service import (
    CommentService,
    JWTService,
    ReactionService,
    iter_nodes,
)
from comdeply.domain.value import CommentId, ReactionType, ThreadScope, UserId

from .views import CommentNodeView, page_window, to_node_views


class GetThreadRequest(BaseModel):
    """Get thread request."""

    site_key: str
    page_id: str
    offset: int = 0
    limit: int | None = None  # Defaults to the configured page size
    auth_token: str | None = None  # JWT token for viewer reactions (optional)


class GetThreadResponse(BaseModel):
    """Get thread response."""

    site_key: str
    page_id: str
    comments: list[CommentNodeView]
    total_roots: int
    offset: int
    limit: int


class GetThreadUseCase:
    """Use case for reading one page of a thread as a reply tree."""

    def __init__(
        self,
        comment_service: CommentService,
        reaction_service: ReactionService,
        jwt_service: JWTService,
        comment_settings: CommentSettings,
    ) -> None:
        """Initialize get thread use case.

        Args:
            comment_service: Comment domain service
            reaction_service: Reaction service for the viewer's reactions
            jwt_service: JWT service for decoding auth tokens
            comment_settings: Comment settings (page size, placeholders)
        """
        self.comment_service = comment_service
        self.reaction_service = reaction_service
        self.jwt_service = jwt_service
        self.comment_settings = comment_settings

    async def execute(self, request: GetThreadRequest) -> GetThreadResponse:
        """Execute get thread flow.

        Roots are paginated; each root carries its full visible subtree.
        Deleted comments are redacted in the returned views.

        Args:
            request: Get thread request with scope, page and optional token

        Returns:
            Root nodes with nested replies and viewer reactions
        """
        offset, limit = page_window(
            request.offset, request.limit, self.comment_settings
        )
        scope = ThreadScope(site_key=request.site_key, page_id=request.page_id)
        thread = await self.comment_service.get_thread(scope, offset, limit)

        reactions: dict[CommentId, ReactionType] = {}
        viewer_id = self.jwt_service.get_user_id_from_token(request.auth_token)
        if viewer_id and thread.roots:
            comment_ids = [node.comment.id for node in iter_nodes(thread.roots)]
            reactions = await self.reaction_service.get_user_reactions(
                UserId(UUID(viewer_id)), comment_ids
            )
            logfire.debug(
                "Viewer reactions loaded", viewer_id=viewer_id, count=len(reactions)
            )

        return GetThreadResponse(
            site_key=scope.site_key,
            page_id=scope.page_id,
            comments=to_node_views(thread.roots, self.comment_settings, reactions),
            total_roots=thread.total_roots,
            offset=offset,
            limit=limit,
        )
