"""
NoteAssist Backend — Notes Route Handlers
===========================================

What:  CRUD endpoints for the caller's notes.
How:   Resolves the caller identity, delegates to NoteService, returns JSON.
Who:   Called by the notes editor frontend.

Endpoints:
    GET    /notes          list caller's notes (oldest-updated first)
    GET    /notes/{id}     fetch one note
    POST   /notes          create note (201)
    PATCH  /notes/{id}     partial update
    DELETE /notes/{id}     delete note

Every handler depends on get_current_user_id, which raises 401 before the
session is touched. Ids are taken as plain strings so that malformed ids
produce the same 404 as unknown ones instead of a schema error.
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from noteassist.database import get_db_session
from noteassist.dependencies import get_current_user_id
from noteassist.schemas.note import (
    ErrorResponse,
    MessageResponse,
    NoteCreate,
    NoteEnvelope,
    NoteListResponse,
    NoteUpdate,
)
from noteassist.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])

_ERRORS = {
    401: {"description": "Missing caller identity", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
_ERRORS_WITH_404 = {
    **_ERRORS,
    404: {"description": "Note not found", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=NoteListResponse,
    responses=_ERRORS,
    summary="List the caller's notes",
)
async def list_notes(
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteListResponse:
    result = await note_service.list_notes(db=db, owner_id=user_id)
    # Note content is private to the caller
    response.headers["Cache-Control"] = "private, no-store"
    return result


@router.get(
    "/{note_id}",
    response_model=NoteEnvelope,
    responses=_ERRORS_WITH_404,
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteEnvelope:
    note = await note_service.get_note(db=db, owner_id=user_id, note_id=note_id)
    response.headers["Cache-Control"] = "private, no-store"
    return NoteEnvelope(note=note)


@router.post(
    "",
    status_code=201,
    response_model=NoteEnvelope,
    responses={**_ERRORS, 400: {"description": "Invalid note data", "model": ErrorResponse}},
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteEnvelope:
    note = await note_service.create_note(db=db, owner_id=user_id, payload=payload)
    return NoteEnvelope(note=note)


@router.patch(
    "/{note_id}",
    response_model=NoteEnvelope,
    responses={**_ERRORS_WITH_404, 400: {"description": "Invalid note data", "model": ErrorResponse}},
    summary="Partially update a note",
    description="Only the supplied fields change. updatedAt is always refreshed.",
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteEnvelope:
    note = await note_service.update_note(
        db=db, owner_id=user_id, note_id=note_id, payload=payload
    )
    return NoteEnvelope(note=note)


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    responses=_ERRORS_WITH_404,
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await note_service.delete_note(db=db, owner_id=user_id, note_id=note_id)
    return MessageResponse(message="Note deleted successfully")
