"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from comdeply.domain.model import Comment, Reaction, Site
from comdeply.domain.value import (
    CommentId,
    CommentState,
    CommentStatus,
    ReactionType,
    SiteId,
    UserId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: Database row as dict

    Returns:
        Comment domain model
    """
    return Comment(
        id=CommentId(_uuid(row["id"])),
        site_key=row["site_key"],
        page_id=row["page_id"],
        author_id=UserId(_uuid(row["author_id"])),
        author_name=row["author_name"],
        content=row["content"],
        parent_id=CommentId(_uuid(row["parent_id"])) if row.get("parent_id") else None,
        depth=row["depth"],
        sort_order=row["sort_order"],
        state=CommentState(row["state"]),
        status=CommentStatus(row["status"]),
        like_count=row["like_count"],
        dislike_count=row["dislike_count"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict.

    Args:
        comment: Comment domain model

    Returns:
        Dict suitable for database insertion/update
    """
    data = comment.model_dump()
    data["state"] = comment.state.value
    data["status"] = comment.status.value
    return data


def row_to_reaction(row: Dict[str, Any]) -> Reaction:
    """Convert database row to Reaction domain model.

    Args:
        row: Database row as dict

    Returns:
        Reaction domain model
    """
    return Reaction(
        comment_id=CommentId(_uuid(row["comment_id"])),
        user_id=UserId(_uuid(row["user_id"])),
        reaction_type=ReactionType(row["reaction_type"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def reaction_to_dict(reaction: Reaction) -> Dict[str, Any]:
    """Convert Reaction domain model to database dict."""
    data = reaction.model_dump()
    data["reaction_type"] = reaction.reaction_type.value
    return data


def row_to_site(row: Dict[str, Any]) -> Site:
    """Convert database row to Site domain model."""
    return Site(
        id=SiteId(_uuid(row["id"])),
        site_key=row["site_key"],
        owner_id=UserId(_uuid(row["owner_id"])),
        name=row["name"],
        is_active=row["is_active"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def site_to_dict(site: Site) -> Dict[str, Any]:
    """Convert Site domain model to database dict."""
    return site.model_dump()
