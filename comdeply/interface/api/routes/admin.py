"""Administrator routes."""

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie
from pydantic import BaseModel

from comdeply.application.usecase.comment import DeleteCommentResponse
from comdeply.application.usecase.moderation import (
    AdminDeleteCommentRequest,
    AdminDeleteCommentUseCase,
    RecountReactionsRequest,
    RecountReactionsResponse,
    RecountReactionsUseCase,
    ReorderCommentsRequest,
    ReorderCommentsResponse,
    ReorderCommentsUseCase,
    UpdateCommentStatusRequest,
    UpdateCommentStatusResponse,
    UpdateCommentStatusUseCase,
)
from comdeply.domain.service import JWTService
from comdeply.domain.value import CommentStatus
from comdeply.interface.api.auth import require_admin

router = APIRouter(prefix="/admin", tags=["admin"], route_class=DishkaRoute)


@router.delete("/comments/{comment_id}", response_model=DeleteCommentResponse)
async def admin_delete_comment(
    comment_id: str,
    admin_delete_use_case: FromDishka[AdminDeleteCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> DeleteCommentResponse:
    """Remove any comment."""
    payload = require_admin(jwt_service, auth_token, "remove comments")
    logfire.info("Admin removing comment", admin_id=payload.user_id, comment_id=comment_id)
    return await admin_delete_use_case.execute(
        AdminDeleteCommentRequest(comment_id=comment_id)
    )


class UpdateStatusAPIRequest(BaseModel):
    """API request for changing a comment's moderation status."""

    status: CommentStatus


@router.patch("/comments/{comment_id}/status", response_model=UpdateCommentStatusResponse)
async def update_comment_status(
    comment_id: str,
    request: UpdateStatusAPIRequest,
    update_status_use_case: FromDishka[UpdateCommentStatusUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> UpdateCommentStatusResponse:
    """Approve or reject a comment."""
    require_admin(jwt_service, auth_token, "moderate comments")
    return await update_status_use_case.execute(
        UpdateCommentStatusRequest(comment_id=comment_id, status=request.status)
    )


@router.post("/comments/{comment_id}/recount", response_model=RecountReactionsResponse)
async def recount_reactions(
    comment_id: str,
    recount_use_case: FromDishka[RecountReactionsUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> RecountReactionsResponse:
    """Recompute a comment's like/dislike counters from its reactions."""
    require_admin(jwt_service, auth_token, "recount reactions")
    return await recount_use_case.execute(
        RecountReactionsRequest(comment_id=comment_id)
    )


@router.post(
    "/sites/{site_key}/pages/{page_id:path}/reorder",
    response_model=ReorderCommentsResponse,
)
async def reorder_comments(
    site_key: str,
    page_id: str,
    reorder_use_case: FromDishka[ReorderCommentsUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ReorderCommentsResponse:
    """Rewrite a thread's sort keys into canonical form.

    Runs in the request transaction; large threads are better served by
    ``scripts/reorder_comments.py``.

    Answers 409 ``sort_key_conflict`` when a comment below the roots has
    more than 9 replies: the canonical layout has no room for them, so the
    thread is left as it is and the message names the comment.
    """
    payload = require_admin(jwt_service, auth_token, "reorder comments")
    logfire.info(
        "Admin reordering thread",
        admin_id=payload.user_id,
        site_key=site_key,
        page_id=page_id,
    )
    return await reorder_use_case.execute(
        ReorderCommentsRequest(site_key=site_key, page_id=page_id)
    )
