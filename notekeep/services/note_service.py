"""
Notekeep Backend: Note Service
===============================

What:  The five note operations (list, get, create, update, delete) over an
       injected NoteStore.
How:   Each method is a direct passthrough to one store call. A None result
       from a single-document call becomes NotFoundError; any exception that
       is not already an application error is logged with its traceback and
       converted into OperationFailedError.
Who:   Called by the /notes route handlers.

Error Mapping:
    store returns None                  → NotFoundError       (404)
    NoteValidationError / StoreError /
    InvalidIdentifierError              → propagate as-is     (400)
    anything else                       → OperationFailedError (400)

NoteService holds no state besides the store handle; one instance per
request is fine.
"""

import logging
from typing import Any, Dict, List

from notekeep.exceptions import NotekeepError, NotFoundError, OperationFailedError
from notekeep.schemas.note import NoteDocument
from notekeep.store.base import NoteStore

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Args:
        store: the persistence backend (SqlNoteStore in production)
    """

    def __init__(self, store: NoteStore):
        self.store = store

    def _fail(self, operation: str, error: Exception, **context: Any) -> OperationFailedError:
        logger.error(
            "Unexpected store error during %s: %s",
            operation,
            str(error),
            exc_info=error,
        )
        context["error_type"] = type(error).__name__
        return OperationFailedError(
            message=f"Could not {operation}",
            context=context,
        )

    async def list_notes(self) -> List[NoteDocument]:
        """All notes in store order. Never raises NotFoundError."""
        try:
            return await self.store.find()
        except NotekeepError:
            raise
        except Exception as e:
            raise self._fail("list notes", e) from e

    async def get_note(self, note_id: str) -> NoteDocument:
        """
        Raises:
            NotFoundError: no note with `note_id`
            OperationFailedError: malformed id or store failure
        """
        try:
            note = await self.store.find_by_id(note_id)
        except NotekeepError:
            raise
        except Exception as e:
            raise self._fail("retrieve the note", e, note_id=note_id) from e

        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return note

    async def create_note(self, data: Dict[str, Any]) -> NoteDocument:
        """
        Persist a new note; the store assigns its id.

        Raises:
            OperationFailedError: validation or store failure
        """
        try:
            return await self.store.create(data)
        except NotekeepError:
            raise
        except Exception as e:
            raise self._fail("create the note", e) from e

    async def update_note(self, note_id: str, changes: Dict[str, Any]) -> NoteDocument:
        """
        Apply a partial update and return the post-update note.

        Fields missing from `changes` keep their stored values. The merged
        document is validated as a whole by the store.

        Raises:
            NotFoundError: no note with `note_id`
            OperationFailedError: malformed id, validation or store failure
        """
        try:
            note = await self.store.find_by_id_and_update(note_id, changes)
        except NotekeepError:
            raise
        except Exception as e:
            raise self._fail("update the note", e, note_id=note_id) from e

        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return note

    async def delete_note(self, note_id: str) -> NoteDocument:
        """
        Delete a note and return the removed document.

        Raises:
            NotFoundError: no note with `note_id`
            OperationFailedError: malformed id or store failure
        """
        try:
            note = await self.store.find_by_id_and_delete(note_id)
        except NotekeepError:
            raise
        except Exception as e:
            raise self._fail("delete the note", e, note_id=note_id) from e

        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return note
