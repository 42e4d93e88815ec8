"""Strongly typed identifiers for Comdeply domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

# Core domain entity identifiers
CommentId = NewType("CommentId", UUID)
SiteId = NewType("SiteId", UUID)

# Users live in the authentication system; only their ID crosses the boundary
UserId = NewType("UserId", UUID)
