"""initial_schema

Create the schema for the Comdeply comment engine:
- Sites (read-only here, owned by the administration backend)
- Comments (bounded-depth threads ordered by a decimal sort key)
- Comment reactions (one like or dislike per user and comment)

Revision ID: 3c1f0a9d2b7e
Revises:
Create Date: 2026-10-19 10:12:44.512301

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f0a9d2b7e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE comment_state AS ENUM (
                'active', 'deleted_with_descendants', 'deleted_leaf'
            );
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE comment_status AS ENUM ('pending', 'approved', 'rejected');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE reaction_type AS ENUM ('like', 'dislike');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # SITES table
    # ========================================================================
    op.create_table(
        "sites",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("site_key", sa.String(100), nullable=False),
        sa.Column("owner_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("site_key", name="uq_sites_site_key"),
    )
    op.create_index("idx_sites_owner_id", "sites", ["owner_id"])

    # ========================================================================
    # COMMENTS table
    # ========================================================================
    op.create_table(
        "comments",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("site_key", sa.String(100), nullable=False),
        sa.Column("page_id", sa.String(255), nullable=False),
        sa.Column("parent_id", sa.UUID(), nullable=True),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("author_name", sa.String(100), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("depth", sa.Integer(), nullable=False, server_default="1"),
        # Unconstrained NUMERIC keeps every fractional digit
        sa.Column("sort_order", sa.Numeric(), nullable=False),
        sa.Column(
            "state",
            postgresql.ENUM(
                "active",
                "deleted_with_descendants",
                "deleted_leaf",
                name="comment_state",
                create_type=False,
            ),
            nullable=False,
            server_default="active",
        ),
        sa.Column(
            "status",
            postgresql.ENUM(
                "pending",
                "approved",
                "rejected",
                name="comment_status",
                create_type=False,
            ),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("dislike_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["site_key"], ["sites.site_key"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["parent_id"], ["comments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("depth >= 1", name="depth_positive"),
        sa.CheckConstraint("like_count >= 0", name="like_count_non_negative"),
        sa.CheckConstraint("dislike_count >= 0", name="dislike_count_non_negative"),
    )
    op.create_index(
        "idx_comments_scope_sort_order",
        "comments",
        ["site_key", "page_id", "sort_order"],
    )
    op.create_index("idx_comments_parent_id", "comments", ["parent_id"])
    op.create_index("idx_comments_author_id", "comments", ["author_id"])
    op.create_index("idx_comments_created_at", "comments", ["created_at"])

    # Sort keys are unique within a sibling group; roots share the nil UUID
    op.execute("""
        CREATE UNIQUE INDEX uq_comments_sibling_sort_order ON comments (
            site_key,
            page_id,
            COALESCE(parent_id, '00000000-0000-0000-0000-000000000000'::uuid),
            sort_order
        )
    """)

    # ========================================================================
    # COMMENT_REACTIONS table
    # ========================================================================
    op.create_table(
        "comment_reactions",
        sa.Column("comment_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column(
            "reaction_type",
            postgresql.ENUM("like", "dislike", name="reaction_type", create_type=False),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["comment_id"], ["comments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("comment_id", "user_id", name="pk_comment_reactions"),
    )
    op.create_index(
        "idx_comment_reactions_user_id", "comment_reactions", ["user_id"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    # Drop tables (in reverse order of dependencies)
    op.drop_table("comment_reactions")
    op.execute("DROP INDEX IF EXISTS uq_comments_sibling_sort_order")
    op.drop_table("comments")
    op.drop_table("sites")

    # Drop ENUM types
    op.execute("DROP TYPE IF EXISTS reaction_type")
    op.execute("DROP TYPE IF EXISTS comment_status")
    op.execute("DROP TYPE IF EXISTS comment_state")
