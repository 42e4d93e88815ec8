"""Comment use cases."""

from .create_comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
)
from .delete_comment import (
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
)
from .get_comment_counts import (
    GetCommentCountRequest,
    GetCommentCountResponse,
    GetCommentCountsRequest,
    GetCommentCountsResponse,
    GetCommentCountsUseCase,
    GetCommentCountUseCase,
)
from .get_thread import GetThreadRequest, GetThreadResponse, GetThreadUseCase
from .list_comments import (
    ListCommentsRequest,
    ListCommentsResponse,
    ListCommentsUseCase,
)
from .list_user_comments import (
    ListUserCommentsRequest,
    ListUserCommentsResponse,
    ListUserCommentsUseCase,
)
from .update_comment import (
    UpdateCommentRequest,
    UpdateCommentResponse,
    UpdateCommentUseCase,
)
from .views import CommentNodeView, CommentSummary

__all__ = [
    "CommentNodeView",
    "CommentSummary",
    "CreateCommentRequest",
    "CreateCommentResponse",
    "CreateCommentUseCase",
    "DeleteCommentRequest",
    "DeleteCommentResponse",
    "DeleteCommentUseCase",
    "GetCommentCountRequest",
    "GetCommentCountResponse",
    "GetCommentCountUseCase",
    "GetCommentCountsRequest",
    "GetCommentCountsResponse",
    "GetCommentCountsUseCase",
    "GetThreadRequest",
    "GetThreadResponse",
    "GetThreadUseCase",
    "ListCommentsRequest",
    "ListCommentsResponse",
    "ListCommentsUseCase",
    "ListUserCommentsRequest",
    "ListUserCommentsResponse",
    "ListUserCommentsUseCase",
    "UpdateCommentRequest",
    "UpdateCommentResponse",
    "UpdateCommentUseCase",
]
