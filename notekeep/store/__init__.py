# Store package init
"""
Notekeep Backend: Store Layer
==============================

What:  Note persistence adapters and the connection-state signal.

Store Inventory:
    - NoteStore (abstract): find / find_by_id / create /
      find_by_id_and_update / find_by_id_and_delete + state
    - SqlNoteStore: async SQLAlchemy (PostgreSQL in production)
    - InMemoryNoteStore: dict-backed, for tests and local runs
"""

from notekeep.store.base import ConnectionState, NoteStore, parse_note_id
from notekeep.store.memory_store import InMemoryNoteStore
from notekeep.store.sql_store import SqlNoteStore

__all__ = [
    "ConnectionState",
    "NoteStore",
    "parse_note_id",
    "InMemoryNoteStore",
    "SqlNoteStore",
]
