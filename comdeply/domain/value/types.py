"""Domain value objects for Comdeply.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum

from pydantic import Field

from comdeply.domain.value.common import ValueObject


class ThreadScope(ValueObject):
    """The (site, page) pair that bounds one comment thread.

    Every comment belongs to exactly one scope; sort keys, roots and
    counters are all computed within a scope.
    """

    site_key: str = Field(min_length=1, max_length=100)
    page_id: str = Field(min_length=1, max_length=255)

    def __str__(self) -> str:
        return f"{self.site_key}/{self.page_id}"


class CommentState(str, Enum):
    """Lifecycle state of a comment.

    ACTIVE -> DELETED_WITH_DESCENDANTS (tombstone, kept for its replies)
    ACTIVE -> DELETED_LEAF (structurally dead)
    DELETED_WITH_DESCENDANTS -> DELETED_LEAF (last living reply went away)
    """

    ACTIVE = "active"
    DELETED_WITH_DESCENDANTS = "deleted_with_descendants"
    DELETED_LEAF = "deleted_leaf"

    @property
    def is_deleted(self) -> bool:
        return self is not CommentState.ACTIVE

    @property
    def is_living(self) -> bool:
        """Whether a comment in this state keeps its ancestors alive."""
        return self is not CommentState.DELETED_LEAF


class CommentStatus(str, Enum):
    """Moderation status of a comment."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReactionType(str, Enum):
    """Type of reaction a user can leave on a comment."""

    LIKE = "like"
    DISLIKE = "dislike"
