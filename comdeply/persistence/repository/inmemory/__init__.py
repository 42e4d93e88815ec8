"""In-memory repository implementations for testing."""

from .comment import InMemoryCommentRepository
from .reaction import InMemoryReactionRepository
from .site import InMemorySiteRepository

__all__ = [
    "InMemoryCommentRepository",
    "InMemoryReactionRepository",
    "InMemorySiteRepository",
]
