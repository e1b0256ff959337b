"""
Notekeep Backend: In-Memory Note Store
=======================================

What:  Dict-backed NoteStore with the same contract as SqlNoteStore.
Who:   Used by the test suite and for running the API without a database.
How:   Notes live in an insertion-ordered dict keyed by UUID. Writes hold an
       asyncio.Lock so each read-merge-write is atomic per process. Returned
       documents are copies; mutating them does not touch stored state.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from notekeep.schemas.note import (
    NOTE_SCHEMA_VERSION,
    NoteDocument,
    merge_note_fields,
    validate_note_fields,
)
from notekeep.store.base import ConnectionState, NoteStore, parse_note_id


class InMemoryNoteStore(NoteStore):
    """Process-local note store."""

    def __init__(self):
        self._notes: Dict[uuid.UUID, NoteDocument] = {}
        self._lock = asyncio.Lock()
        self._state = ConnectionState.DISCONNECTED

    @property
    def state(self) -> ConnectionState:
        return self._state

    def set_state(self, state: ConnectionState) -> None:
        """Force a connection state (simulates a dropped link)."""
        self._state = state

    async def connect(self) -> None:
        self._state = ConnectionState.CONNECTED

    async def close(self) -> None:
        self._state = ConnectionState.DISCONNECTED

    async def find(self) -> List[NoteDocument]:
        return [note.model_copy(deep=True) for note in self._notes.values()]

    async def find_by_id(self, note_id: str) -> Optional[NoteDocument]:
        note = self._notes.get(parse_note_id(note_id))
        return note.model_copy(deep=True) if note else None

    async def create(self, data: Dict[str, Any]) -> NoteDocument:
        fields = validate_note_fields(data)
        now = datetime.now(timezone.utc)
        async with self._lock:
            note_id = uuid.uuid4()
            while note_id in self._notes:
                note_id = uuid.uuid4()
            note = NoteDocument(
                id=note_id,
                schema_version=NOTE_SCHEMA_VERSION,
                created_at=now,
                updated_at=now,
                **fields.model_dump(),
            )
            self._notes[note_id] = note
        return note.model_copy(deep=True)

    async def find_by_id_and_update(
        self, note_id: str, changes: Dict[str, Any]
    ) -> Optional[NoteDocument]:
        key = parse_note_id(note_id)
        async with self._lock:
            current = self._notes.get(key)
            if current is None:
                return None
            merged = merge_note_fields(current.fields(), changes)
            updated = current.model_copy(
                update={
                    **merged.model_dump(),
                    "schema_version": NOTE_SCHEMA_VERSION,
                    "updated_at": datetime.now(timezone.utc),
                },
                deep=True,
            )
            self._notes[key] = updated
        return updated.model_copy(deep=True)

    async def find_by_id_and_delete(self, note_id: str) -> Optional[NoteDocument]:
        key = parse_note_id(note_id)
        async with self._lock:
            return self._notes.pop(key, None)
