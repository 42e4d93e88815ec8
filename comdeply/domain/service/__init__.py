"""Domain services."""

from .base import Service
from .comment_service import CommentDeletion, CommentService
from .hierarchy import CommentNode, CommentThread, HierarchyBuilder, iter_nodes
from .jwt_service import JWTService
from .quota import MonthlyQuotaChecker, QuotaChecker
from .reaction_service import ReactionService
from .reorder_service import ReorderService
from .sort_key import SortKeyAssigner

__all__ = [
    "CommentDeletion",
    "CommentNode",
    "CommentService",
    "CommentThread",
    "HierarchyBuilder",
    "JWTService",
    "MonthlyQuotaChecker",
    "QuotaChecker",
    "ReactionService",
    "ReorderService",
    "Service",
    "SortKeyAssigner",
    "iter_nodes",
]
