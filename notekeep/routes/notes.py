"""
Notekeep Backend: Notes Route Handlers
=======================================

What:  CRUD endpoints for the note resource.
How:   Parses the path/body, delegates to NoteService, wraps the result in
       the response envelope. Errors are raised as exceptions and turned
       into responses by the global handlers in main.py.
Who:   Any HTTP client of the service.

Endpoints:
    GET    /notes          → 200 {"notes": [...]}
    GET    /notes/{id}     → 200 {"note": {...}}     | 404 | 400
    POST   /notes          → 201 {"note": {...}}     | 400
    PATCH  /notes/{id}     → 200 {"note": {...}}     | 404 | 400
    DELETE /notes/{id}     → 200 {"status": "success"} | 404 | 400

`note_id` is taken as a plain string so that a malformed id reaches the
store and fails as 400 rather than FastAPI's 422.
"""

import logging

from fastapi import APIRouter, Depends

from notekeep.dependencies import get_note_service
from notekeep.schemas.note import (
    MessageResponse,
    NoteCreate,
    NoteEnvelope,
    NoteListEnvelope,
    NoteUpdate,
    StatusResponse,
)
from notekeep.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])

_FAIL = {400: {"description": "Operation failed", "model": StatusResponse}}
_NOT_FOUND = {404: {"description": "Note not found", "model": MessageResponse}}


@router.get(
    "/notes",
    response_model=NoteListEnvelope,
    responses=_FAIL,
    summary="List all notes",
)
async def list_notes(service: NoteService = Depends(get_note_service)) -> NoteListEnvelope:
    """Returns every stored note in creation order."""
    notes = await service.list_notes()
    return NoteListEnvelope(notes=notes)


@router.get(
    "/notes/{note_id}",
    response_model=NoteEnvelope,
    responses={**_NOT_FOUND, **_FAIL},
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    note = await service.get_note(note_id)
    return NoteEnvelope(note=note)


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteEnvelope,
    responses=_FAIL,
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    """
    Create a note from `payload`.

    The store assigns the id, timestamps and schema version.
    """
    note = await service.create_note(payload.model_dump())
    return NoteEnvelope(note=note)


@router.patch(
    "/notes/{note_id}",
    response_model=NoteEnvelope,
    responses={**_NOT_FOUND, **_FAIL},
    summary="Partially update a note",
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    """
    Apply the fields present in the body; omitted fields are left untouched.

    Returns the note as stored after the update.
    """
    changes = payload.model_dump(exclude_unset=True)
    note = await service.update_note(note_id, changes)
    return NoteEnvelope(note=note)


@router.delete(
    "/notes/{note_id}",
    response_model=StatusResponse,
    responses={**_NOT_FOUND, **_FAIL},
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> StatusResponse:
    note = await service.delete_note(note_id)
    logger.debug("Deleted note %s (%s)", note.id, note.title)
    return StatusResponse(status="success")
