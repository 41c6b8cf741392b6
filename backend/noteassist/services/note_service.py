"""
NoteAssist Backend — Note Service (Owner-Scoped Note Store)
=============================================================

What:  CRUD over the `notes` table, always scoped by the caller's identity.
How:   Builds SQLAlchemy statements against the session provided per request.
Who:   Called by the /notes route handlers.

Ownership model:
    Every statement carries `owner_id = :caller`, except the insert, which
    stamps it. Update and delete are single conditional statements:

        UPDATE notes SET ... WHERE id = :id AND owner_id = :owner RETURNING *
        DELETE FROM notes WHERE id = :id AND owner_id = :owner RETURNING id

    There is no separate ownership read, so no window exists between the
    check and the write. Zero affected rows means NotFound, whether the id
    is unknown, malformed, or owned by someone else.

NoteService is stateless; it receives the db session for each call.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from noteassist.exceptions import DatabaseError, NotFoundError
from noteassist.models.note import Note, utcnow
from noteassist.schemas.note import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
)

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; every stored value is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_response(note: Note) -> NoteResponse:
    return NoteResponse(
        id=note.id,
        owner_id=note.owner_id,
        title=note.title,
        content=note.content,
        tags=list(note.tags or []),
        created_at=_as_utc(note.created_at),
        updated_at=_as_utc(note.updated_at),
    )


def _parse_note_id(note_id: str) -> Optional[uuid.UUID]:
    """UUID for a path id, or None when it cannot be one of ours."""
    try:
        return uuid.UUID(str(note_id))
    except ValueError:
        return None


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        SQLAlchemy errors are wrapped in DatabaseError (hides SQL details).
        NotFoundError propagates as-is.
    """

    async def list_notes(self, db: AsyncSession, owner_id: str) -> NoteListResponse:
        """
        All of the caller's notes, ordered by updated_at ascending.

        Query plan:
            SELECT * FROM notes WHERE owner_id = :owner
            ORDER BY updated_at ASC, created_at ASC
            → idx_notes_owner_updated range scan
        """
        try:
            result = await db.execute(
                select(Note)
                .where(Note.owner_id == owner_id)
                .order_by(Note.updated_at.asc(), Note.created_at.asc())
            )
            notes = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        return NoteListResponse(notes=[_to_response(note) for note in notes])

    async def get_note(self, db: AsyncSession, owner_id: str, note_id: str) -> NoteResponse:
        """
        Retrieve a single note owned by the caller.

        Raises:
            NotFoundError: unknown id, malformed id, or another owner's note
            DatabaseError: query execution failed
        """
        parsed_id = _parse_note_id(note_id)
        if parsed_id is None:
            raise NotFoundError(resource="note", resource_id=note_id)

        try:
            result = await db.execute(
                select(Note).where(Note.id == parsed_id, Note.owner_id == owner_id)
            )
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": note_id},
            ) from e

        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return _to_response(note)

    async def create_note(
        self, db: AsyncSession, owner_id: str, payload: NoteCreate
    ) -> NoteResponse:
        """
        Insert a new note stamped with the caller's identity.

        The id and both timestamps are assigned here; the payload schema has
        no field for them.
        """
        now = utcnow()
        note = Note(
            id=uuid.uuid4(),
            owner_id=owner_id,
            title=payload.title,
            content=payload.content,
            tags=list(payload.tags),
            created_at=now,
            updated_at=now,
        )

        try:
            db.add(note)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Note created: %s (owner=%s)", note.id, owner_id)
        return _to_response(note)

    async def update_note(
        self,
        db: AsyncSession,
        owner_id: str,
        note_id: str,
        payload: NoteUpdate,
    ) -> NoteResponse:
        """
        Merge the supplied fields into the caller's note.

        Omitted fields keep their values; updated_at is always refreshed,
        even for an empty payload.
        """
        parsed_id = _parse_note_id(note_id)
        if parsed_id is None:
            raise NotFoundError(resource="note", resource_id=note_id)

        changes = payload.changes()
        changes["updated_at"] = utcnow()

        try:
            result = await db.execute(
                update(Note)
                .where(Note.id == parsed_id, Note.owner_id == owner_id)
                .values(**changes)
                .returning(Note)
            )
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the note. Please try again.",
                context={"note_id": note_id},
            ) from e

        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)

        logger.info("Note updated: %s (fields=%s)", note_id, sorted(changes))
        return _to_response(note)

    async def delete_note(self, db: AsyncSession, owner_id: str, note_id: str) -> None:
        """Hard-delete the caller's note. There is no recovery path."""
        parsed_id = _parse_note_id(note_id)
        if parsed_id is None:
            raise NotFoundError(resource="note", resource_id=note_id)

        try:
            result = await db.execute(
                delete(Note)
                .where(Note.id == parsed_id, Note.owner_id == owner_id)
                .returning(Note.id)
            )
            deleted_id = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": note_id},
            ) from e

        if deleted_id is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        logger.info("Note deleted: %s", note_id)


# Stateless; shared by all requests
note_service = NoteService()
