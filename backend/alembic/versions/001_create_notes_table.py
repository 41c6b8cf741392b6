"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the owner-scoped `notes` table.
How:   UUID primary key, TEXT[] tags on PostgreSQL (JSON elsewhere), timezone-aware
       timestamps, and a composite (owner_id, updated_at) index for the list query.

Rollback: downgrade() drops the table entirely (destructive — all notes lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notes",
        sa.Column(
            "id",
            sa.Uuid(as_uuid=True),
            nullable=False,
            comment="Store-assigned unique identifier",
        ),
        sa.Column(
            "owner_id",
            sa.String(255),
            nullable=False,
            comment="Identity of the authenticated creator",
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
        ),
        sa.Column(
            "tags",
            sa.JSON().with_variant(postgresql.ARRAY(sa.Text()), "postgresql"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="Last mutating write (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_notes_owner_updated",
        "notes",
        ["owner_id", "updated_at"],
    )


def downgrade() -> None:
    """Drop the notes table. All note data is permanently lost."""
    op.drop_index("idx_notes_owner_updated", table_name="notes")
    op.drop_table("notes")
