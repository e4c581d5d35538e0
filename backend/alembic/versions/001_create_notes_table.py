"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2025-01-15 00:00:00.000000+00:00

What:  Creates the `notes` table: one row per markdown note, owned by one user.
How:   PostgreSQL types: UUID keys, TEXT[] tags, TIMESTAMP WITH TIME ZONE.

Rollback: downgrade() drops the table (all notes are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the notes table and the per-user listing index."""
    op.create_table(
        "notes",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Unique identifier, assigned by the backend",
        ),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            comment="Owner (auth service user id); set once at creation",
        ),
        sa.Column(
            "title",
            sa.String(500),
            nullable=False,
            server_default=sa.text("'Untitled Note'"),
            comment="Free-text title",
        ),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
            comment="Markdown body",
        ),
        sa.Column(
            "tags",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'"),
            comment="Ordered, lowercase, unique tags",
        ),
        sa.Column(
            "favorite",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
            comment="Favorite flag",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="Last modification (UTC); refreshed on every update",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Serves the only list query: WHERE user_id = ? ORDER BY created_at DESC
    op.create_index(
        "idx_notes_user_created_at",
        "notes",
        ["user_id", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_notes_user_created_at", table_name="notes")
    op.drop_table("notes")
