"""Reaction routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie
from pydantic import BaseModel

from comdeply.application.usecase.reaction import (
    ReactRequest,
    ReactResponse,
    ReactUseCase,
)
from comdeply.domain.service import JWTService
from comdeply.domain.value import ReactionType
from comdeply.interface.api.auth import require_user

router = APIRouter(tags=["reactions"], route_class=DishkaRoute)


class ReactAPIRequest(BaseModel):
    """API request for reacting to a comment."""

    reaction_type: ReactionType


@router.post("/comments/{comment_id}/reactions", response_model=ReactResponse)
async def react(
    comment_id: str,
    request: ReactAPIRequest,
    react_use_case: FromDishka[ReactUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ReactResponse:
    """Like or dislike a comment.

    Sending the same reaction again removes it; sending the other one
    flips it. Requires authentication.

    Args:
        comment_id: Comment UUID
        request: Reaction type
        react_use_case: React use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie

    Returns:
        Updated counters and the caller's current reaction
    """
    payload = require_user(jwt_service, auth_token, "react to comments")
    return await react_use_case.execute(
        ReactRequest(
            comment_id=comment_id,
            user_id=payload.user_id,
            reaction_type=request.reaction_type,
        )
    )
