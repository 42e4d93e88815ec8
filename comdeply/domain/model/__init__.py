"""Domain model entities for Comdeply."""

from comdeply.domain.model.comment import Comment
from comdeply.domain.model.reaction import Reaction
from comdeply.domain.model.site import Site

__all__ = [
    "Comment",
    "Reaction",
    "Site",
]
