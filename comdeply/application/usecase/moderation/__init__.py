"""Moderation use cases (administrators only)."""

from .admin_delete_comment import AdminDeleteCommentRequest, AdminDeleteCommentUseCase
from .recount_reactions import (
    RecountReactionsRequest,
    RecountReactionsResponse,
    RecountReactionsUseCase,
)
from .reorder_comments import (
    ReorderCommentsRequest,
    ReorderCommentsResponse,
    ReorderCommentsUseCase,
)
from .update_comment_status import (
    UpdateCommentStatusRequest,
    UpdateCommentStatusResponse,
    UpdateCommentStatusUseCase,
)

__all__ = [
    "AdminDeleteCommentRequest",
    "AdminDeleteCommentUseCase",
    "RecountReactionsRequest",
    "RecountReactionsResponse",
    "RecountReactionsUseCase",
    "ReorderCommentsRequest",
    "ReorderCommentsResponse",
    "ReorderCommentsUseCase",
    "UpdateCommentStatusRequest",
    "UpdateCommentStatusResponse",
    "UpdateCommentStatusUseCase",
]
