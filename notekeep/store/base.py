"""
Notekeep Backend: Abstract Note Store Interface
================================================

What:  The contract every note persistence backend implements, plus the
       connection-state signal the health check reads.
How:   Concrete stores inherit from NoteStore: SqlNoteStore (PostgreSQL via
       async SQLAlchemy) and InMemoryNoteStore (tests, local runs).
Who:   Injected into the FastAPI app at construction; used by NoteService
       and the health route.

Contract:
    - Single-document lookups return None when the id is unknown; they
      never raise for a miss.
    - A raw id that is not a UUID raises InvalidIdentifierError.
    - Writes validate the complete resulting document and raise
      NoteValidationError when it violates the field contract.
    - Driver failures are wrapped in StoreError.
"""

import uuid
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Dict, List, Optional

from notekeep.exceptions import InvalidIdentifierError
from notekeep.schemas.note import NoteDocument


class ConnectionState(IntEnum):
    """Link health of a store, numbered like a driver ready-state."""

    DISCONNECTED = 0
    CONNECTED = 1
    CONNECTING = 2
    DISCONNECTING = 3

    @property
    def label(self) -> str:
        return self.name.lower()


def parse_note_id(raw_id: Any) -> uuid.UUID:
    """
    Parse a path-supplied note id.

    Raises:
        InvalidIdentifierError: `raw_id` is not a UUID
    """
    if isinstance(raw_id, uuid.UUID):
        return raw_id
    try:
        return uuid.UUID(str(raw_id))
    except (TypeError, ValueError, AttributeError) as e:
        raise InvalidIdentifierError(str(raw_id)) from e


class NoteStore(ABC):
    """
    Abstract persistence backend for notes.

    Implementations own their concurrency control: each write is atomic per
    document.
    """

    @property
    @abstractmethod
    def state(self) -> ConnectionState:
        """Current connection state."""
        ...

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish the store connection.

        Raises:
            StoreConnectionError: the backend could not be reached
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release all connections; state ends as DISCONNECTED."""
        ...

    async def ping(self) -> ConnectionState:
        """
        Refresh and return the connection state.

        Backends with a live link override this with a round trip.
        """
        return self.state

    @abstractmethod
    async def find(self) -> List[NoteDocument]:
        """Every stored note, in creation order."""
        ...

    @abstractmethod
    async def find_by_id(self, note_id: str) -> Optional[NoteDocument]:
        """The note with `note_id`, or None."""
        ...

    @abstractmethod
    async def create(self, data: Dict[str, Any]) -> NoteDocument:
        """Validate `data`, assign an id and timestamps, and persist it."""
        ...

    @abstractmethod
    async def find_by_id_and_update(
        self, note_id: str, changes: Dict[str, Any]
    ) -> Optional[NoteDocument]:
        """
        Merge `changes` into the note, re-validate the merged document and
        persist it.

        Returns:
            The post-update note, or None if `note_id` is unknown.
        """
        ...

    @abstractmethod
    async def find_by_id_and_delete(self, note_id: str) -> Optional[NoteDocument]:
        """Delete the note and return it as it was, or None if unknown."""
        ...
