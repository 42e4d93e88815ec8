"""Repository interfaces for Comdeply domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from comdeply.domain.repository.comment import CommentRepository
from comdeply.domain.repository.reaction import ReactionRepository
from comdeply.domain.repository.site import SiteRepository

__all__ = [
    "CommentRepository",
    "ReactionRepository",
    "SiteRepository",
]
