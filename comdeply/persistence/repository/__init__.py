"""PostgreSQL repository implementations."""

from comdeply.persistence.repository.comment import PostgresCommentRepository
from comdeply.persistence.repository.reaction import PostgresReactionRepository
from comdeply.persistence.repository.site import PostgresSiteRepository

__all__ = [
    "PostgresCommentRepository",
    "PostgresReactionRepository",
    "PostgresSiteRepository",
]
