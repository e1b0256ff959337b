"""
Notekeep Backend: FastAPI Dependencies
=======================================

What:  Resolves the injected NoteStore and builds a NoteService per request.
How:   create_app() stores the NoteStore on `app.state.note_store`; these
       functions read it back through the Request so routes never touch
       module-level state.

Example usage in a route:
    @router.get("/notes")
    async def list_notes(service: NoteService = Depends(get_note_service)):
        return await service.list_notes()
"""

from fastapi import Depends, Request

from notekeep.services.note_service import NoteService
from notekeep.store.base import NoteStore


def get_note_store(request: Request) -> NoteStore:
    return request.app.state.note_store


def get_note_service(store: NoteStore = Depends(get_note_store)) -> NoteService:
    return NoteService(store)
