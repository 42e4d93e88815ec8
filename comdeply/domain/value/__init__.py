"""Domain value objects for Comdeply."""

from comdeply.domain.value.identifiers import CommentId, SiteId, UserId
from comdeply.domain.value.types import (
    CommentState,
    CommentStatus,
    ReactionType,
    ThreadScope,
)

__all__ = [
    # Identifiers
    "CommentId",
    "SiteId",
    "UserId",
    # Types
    "CommentState",
    "CommentStatus",
    "ReactionType",
    "ThreadScope",
]
