"""Reaction entity.

A reaction is a user's like or dislike on a comment. Likes and dislikes
are mutually exclusive: a user holds at most one reaction per comment.
"""

from datetime import datetime

from pydantic import Field

from comdeply.domain.model.common import DomainModel
from comdeply.domain.value import CommentId, ReactionType, UserId
from comdeply.util.clock import utc_now


class Reaction(DomainModel):
    """Reaction entity.

    Business rules:
    - Identity is the (comment_id, user_id) pair (enforced by primary key)
    - Reacting with the same type again removes the reaction
    - Reacting with the opposite type flips it
    """

    comment_id: CommentId
    user_id: UserId
    reaction_type: ReactionType
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
