"""SQLAlchemy table definitions for Comdeply.

These table definitions are used with SQLAlchemy Core queries.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# SITES TABLE (owned by the administration backend, read here)
# ============================================================================
sites_table = Table(
    "sites",
    metadata,
    Column("id", UUID, primary_key=True, server_default="gen_random_uuid()"),
    Column("site_key", String(100), nullable=False, unique=True),
    Column("owner_id", UUID, nullable=False),
    Column("name", String(255), nullable=False),
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_sites_owner_id", sites_table.c.owner_id)

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID, primary_key=True, server_default="gen_random_uuid()"),
    Column(
        "site_key",
        String(100),
        ForeignKey("sites.site_key", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("page_id", String(255), nullable=False),
    Column(
        "parent_id", UUID, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    ),
    Column("author_id", UUID, nullable=False),
    Column("author_name", String(100), nullable=False),  # Denormalized
    Column("content", Text, nullable=False),
    Column("depth", Integer, nullable=False, server_default="1"),
    Column("sort_order", Numeric, nullable=False),  # Unbounded precision
    Column(
        "state",
        Enum(
            "active",
            "deleted_with_descendants",
            "deleted_leaf",
            name="comment_state",
            create_type=False,
        ),
        nullable=False,
        server_default="active",
    ),
    Column(
        "status",
        Enum("pending", "approved", "rejected", name="comment_status", create_type=False),
        nullable=False,
        server_default="pending",
    ),
    Column("like_count", Integer, nullable=False, server_default="0"),
    Column("dislike_count", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("depth >= 1", name="depth_positive"),
    CheckConstraint("like_count >= 0", name="like_count_non_negative"),
    CheckConstraint("dislike_count >= 0", name="dislike_count_non_negative"),
)

Index(
    "idx_comments_scope_sort_order",
    comments_table.c.site_key,
    comments_table.c.page_id,
    comments_table.c.sort_order,
)
Index("idx_comments_parent_id", comments_table.c.parent_id)
Index("idx_comments_author_id", comments_table.c.author_id)
Index("idx_comments_created_at", comments_table.c.created_at)
# Note: the unique sibling sort key index (COALESCE over parent_id) is
# created in the migration, not here

# ============================================================================
# COMMENT REACTIONS TABLE
# ============================================================================
comment_reactions_table = Table(
    "comment_reactions",
    metadata,
    Column(
        "comment_id",
        UUID,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("user_id", UUID, nullable=False),
    Column(
        "reaction_type",
        Enum("like", "dislike", name="reaction_type", create_type=False),
        nullable=False,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    PrimaryKeyConstraint("comment_id", "user_id", name="pk_comment_reactions"),
)

Index("idx_comment_reactions_user_id", comment_reactions_table.c.user_id)
