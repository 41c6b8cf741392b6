"""
NoteAssist Backend — Note SQLAlchemy Model
============================================

What:  ORM model representing the `notes` table.
How:   Inherits from SQLAlchemy's DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key assigned by the store, never by the caller
    - owner_id: identity string from the auth gateway; every query filters on it
    - tags: TEXT[] on PostgreSQL, JSON elsewhere (the test suite runs on SQLite)
    - created_at / updated_at: UTC with timezone

    Composite index on (owner_id, updated_at):
        Serves the list query `WHERE owner_id = :owner ORDER BY updated_at`
        with a single index range scan.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, DateTime, Index, String, Text, Uuid
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from noteassist.database import Base

TITLE_MAX_LENGTH = 200

# JSON on SQLite, native text array on PostgreSQL
TagList = JSON().with_variant(ARRAY(Text()), "postgresql")


def utcnow() -> datetime:
    """Timezone-aware current time used for every timestamp write."""
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A user-owned note.

    Lifecycle:
        1. Inserted with owner_id stamped from the caller identity
        2. Partially updated (title/content/tags); every update refreshes updated_at
        3. Hard-deleted; no tombstone or recovery path
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Store-assigned unique identifier",
    )

    # Set once at creation. No query ever updates this column.
    owner_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Identity of the authenticated creator",
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
    )

    # Rich-text markup from the editor; stored verbatim
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    # Ordered; duplicates allowed (the editor dedupes for display)
    tags: Mapped[List[str]] = mapped_column(
        TagList,
        nullable=False,
        default=list,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="Last mutating write (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_owner_updated", "owner_id", "updated_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, owner_id='{self.owner_id}', "
            f"updated_at='{self.updated_at}')>"
        )
