"""Recount reactions use case."""

from uuid import UUID

from pydantic import BaseModel

from comdeply.application.usecase.base import BaseUseCase
from comdeply.domain.service import ReactionService
from comdeply.domain.value import CommentId


class RecountReactionsRequest(BaseModel):
    """Recount reactions request."""

    comment_id: str  # UUID string


class RecountReactionsResponse(BaseModel):
    """Recount reactions response."""

    comment_id: str
    like_count: int
    dislike_count: int


class RecountReactionsUseCase(BaseUseCase):
    """Use case for repairing a comment's counters from its reaction rows."""

    def __init__(self, reaction_service: ReactionService) -> None:
        self.reaction_service = reaction_service

    async def execute(self, request: RecountReactionsRequest) -> RecountReactionsResponse:
        comment = await self.reaction_service.recount_reactions(
            CommentId(UUID(request.comment_id))
        )
        return RecountReactionsResponse(
            comment_id=str(comment.id),
            like_count=comment.like_count,
            dislike_count=comment.dislike_count,
        )
