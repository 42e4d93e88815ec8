"""Comment routes."""

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Query, status
from pydantic import BaseModel, Field

from comdeply.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
    GetCommentCountRequest,
    GetCommentCountResponse,
    GetCommentCountsRequest,
    GetCommentCountsResponse,
    GetCommentCountsUseCase,
    GetCommentCountUseCase,
    GetThreadRequest,
    GetThreadResponse,
    GetThreadUseCase,
    ListCommentsRequest,
    ListCommentsResponse,
    ListCommentsUseCase,
    ListUserCommentsRequest,
    ListUserCommentsResponse,
    ListUserCommentsUseCase,
    UpdateCommentRequest,
    UpdateCommentResponse,
    UpdateCommentUseCase,
)
from comdeply.domain.service import JWTService
from comdeply.interface.api.auth import require_user

router = APIRouter(tags=["comments"], route_class=DishkaRoute)


@router.get(
    "/sites/{site_key}/pages/{page_id:path}/comments", response_model=GetThreadResponse
)
async def get_thread(
    site_key: str,
    page_id: str,
    get_thread_use_case: FromDishka[GetThreadUseCase],
    offset: int = Query(default=0, ge=0),
    limit: int | None = Query(default=None, ge=1),
    auth_token: str | None = Cookie(default=None),
) -> GetThreadResponse:
    """Get one page of a thread as a reply tree.

    Authentication is optional; with a token each comment carries the
    caller's own reaction.

    Args:
        site_key: Site the widget is embedded on
        page_id: Page identifier within the site
        get_thread_use_case: Get thread use case from DI
        offset: Number of root comments to skip
        limit: Maximum number of root comments
        auth_token: JWT token from cookie (optional)

    Returns:
        Root comments with nested replies, deleted ones redacted
    """
    return await get_thread_use_case.execute(
        GetThreadRequest(
            site_key=site_key,
            page_id=page_id,
            offset=offset,
            limit=limit,
            auth_token=auth_token,
        )
    )


@router.get(
    "/sites/{site_key}/pages/{page_id:path}/comments/flat",
    response_model=ListCommentsResponse,
)
async def list_comments(
    site_key: str,
    page_id: str,
    list_comments_use_case: FromDishka[ListCommentsUseCase],
    offset: int = Query(default=0, ge=0),
    limit: int | None = Query(default=None, ge=1),
    auth_token: str | None = Cookie(default=None),
) -> ListCommentsResponse:
    """List a thread's active comments in creation order."""
    return await list_comments_use_case.execute(
        ListCommentsRequest(
            site_key=site_key,
            page_id=page_id,
            offset=offset,
            limit=limit,
            auth_token=auth_token,
        )
    )


@router.get(
    "/sites/{site_key}/pages/{page_id:path}/comments/count",
    response_model=GetCommentCountResponse,
)
async def count_comments(
    site_key: str,
    page_id: str,
    count_use_case: FromDishka[GetCommentCountUseCase],
) -> GetCommentCountResponse:
    """Count a page's active comments."""
    return await count_use_case.execute(
        GetCommentCountRequest(site_key=site_key, page_id=page_id)
    )


class CommentCountsAPIRequest(BaseModel):
    """API request for batch comment counts."""

    page_ids: list[str] = Field(min_length=1, max_length=100)


@router.post("/sites/{site_key}/comments/counts", response_model=GetCommentCountsResponse)
async def count_comments_by_page(
    site_key: str,
    request: CommentCountsAPIRequest,
    counts_use_case: FromDishka[GetCommentCountsUseCase],
) -> GetCommentCountsResponse:
    """Count active comments for several pages of a site at once."""
    return await counts_use_case.execute(
        GetCommentCountsRequest(site_key=site_key, page_ids=request.page_ids)
    )


class CreateCommentAPIRequest(BaseModel):
    """API request for creating a comment."""

    content: str = Field(min_length=1, max_length=10000)
    parent_id: str | None = None  # Parent comment ID for replies


@router.post(
    "/sites/{site_key}/pages/{page_id:path}/comments",
    response_model=CreateCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    site_key: str,
    page_id: str,
    request: CreateCommentAPIRequest,
    create_comment_use_case: FromDishka[CreateCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> CreateCommentResponse:
    """Post a comment on a page or reply to another comment.

    Requires authentication.

    Args:
        site_key: Site the widget is embedded on
        page_id: Page identifier within the site
        request: Comment creation data
        create_comment_use_case: Create comment use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie

    Returns:
        Created comment details

    Raises:
        HTTPException: If not authenticated
    """
    payload = require_user(jwt_service, auth_token, "post comments")

    response = await create_comment_use_case.execute(
        CreateCommentRequest(
            site_key=site_key,
            page_id=page_id,
            content=request.content,
            author_id=payload.user_id,
            author_name=payload.name,
            parent_id=request.parent_id,
        )
    )
    logfire.info(
        "Comment posted via API",
        comment_id=response.comment.comment_id,
        site_key=site_key,
    )
    return response


class UpdateCommentAPIRequest(BaseModel):
    """API request for updating a comment."""

    content: str = Field(min_length=1, max_length=10000)


@router.patch("/comments/{comment_id}", response_model=UpdateCommentResponse)
async def update_comment(
    comment_id: str,
    request: UpdateCommentAPIRequest,
    update_comment_use_case: FromDishka[UpdateCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> UpdateCommentResponse:
    """Edit a comment's content.

    Only the comment author can edit, and only while it is not deleted.
    """
    payload = require_user(jwt_service, auth_token, "edit comments")
    return await update_comment_use_case.execute(
        UpdateCommentRequest(
            comment_id=comment_id, user_id=payload.user_id, content=request.content
        )
    )


@router.delete("/comments/{comment_id}", response_model=DeleteCommentResponse)
async def delete_comment(
    comment_id: str,
    delete_comment_use_case: FromDishka[DeleteCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> DeleteCommentResponse:
    """Delete one's own comment.

    A comment with living replies stays in the thread as a tombstone;
    otherwise it is removed and dead ancestors are cleaned up.
    """
    payload = require_user(jwt_service, auth_token, "delete comments")
    return await delete_comment_use_case.execute(
        DeleteCommentRequest(comment_id=comment_id, user_id=payload.user_id)
    )


@router.get("/users/me/comments", response_model=ListUserCommentsResponse)
async def list_my_comments(
    list_user_comments_use_case: FromDishka[ListUserCommentsUseCase],
    jwt_service: FromDishka[JWTService],
    offset: int = Query(default=0, ge=0),
    limit: int | None = Query(default=None, ge=1),
    auth_token: str | None = Cookie(default=None),
) -> ListUserCommentsResponse:
    """List the caller's active comments, newest first."""
    payload = require_user(jwt_service, auth_token, "list your comments")
    return await list_user_comments_use_case.execute(
        ListUserCommentsRequest(user_id=payload.user_id, offset=offset, limit=limit)
    )
