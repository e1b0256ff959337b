"""
Notekeep Backend: SQL Note Store
=================================

What:  NoteStore backed by async SQLAlchemy (PostgreSQL + asyncpg in
       production, sqlite+aiosqlite in tests).
How:   One session per operation. The session scope commits on success,
       rolls back on any error, and wraps SQLAlchemy errors in StoreError.
       Updates load the row with SELECT ... FOR UPDATE so the read-merge-write
       is atomic per document on PostgreSQL.

Connection state:
    connect()   CONNECTING → CONNECTED (SELECT 1 succeeded) or DISCONNECTED
    ping()      re-runs SELECT 1 and updates the state
    close()     DISCONNECTING → DISCONNECTED after disposing the pool
    An operation failing with an invalidated connection marks the store
    DISCONNECTED; the next successful round trip marks it CONNECTED again.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict, List, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.database import Base, build_engine, build_session_factory
from notekeep.exceptions import StoreConnectionError, StoreError
from notekeep.models.note import Note
from notekeep.schemas.note import (
    NOTE_SCHEMA_VERSION,
    NoteDocument,
    merge_note_fields,
    validate_note_fields,
)
from notekeep.store.base import ConnectionState, NoteStore, parse_note_id

logger = logging.getLogger(__name__)


class SqlNoteStore(NoteStore):
    """
    Relational note store.

    Args:
        database_url: async SQLAlchemy URL
        create_schema: create missing tables on connect(). Production
            deployments run Alembic migrations instead.
    """

    def __init__(self, database_url: str, create_schema: bool = False):
        self.database_url = database_url
        self.create_schema = create_schema
        self.engine = build_engine(database_url)
        self._session_factory = build_session_factory(self.engine)
        self._state = ConnectionState.DISCONNECTED
        self._closed = False

    @property
    def state(self) -> ConnectionState:
        return self._state

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def connect(self) -> None:
        self._state = ConnectionState.CONNECTING
        self._closed = False
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self.create_schema:
                    await conn.run_sync(Base.metadata.create_all)
        except Exception as e:
            self._state = ConnectionState.DISCONNECTED
            raise StoreConnectionError(
                context={"error_type": type(e).__name__, "error": str(e)},
            ) from e
        self._state = ConnectionState.CONNECTED
        logger.info("Connected to note store (%s)", self.engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        self._state = ConnectionState.DISCONNECTING
        self._closed = True
        try:
            await self.engine.dispose()
        finally:
            self._state = ConnectionState.DISCONNECTED
        logger.info("Note store connections closed")

    async def ping(self) -> ConnectionState:
        if self._closed or self._state in (ConnectionState.CONNECTING, ConnectionState.DISCONNECTING):
            return self._state
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            self._state = ConnectionState.CONNECTED
        except Exception as e:
            logger.warning("Note store ping failed: %s", str(e))
            self._state = ConnectionState.DISCONNECTED
        return self._state

    # ── Session Scope ─────────────────────────────────────────────────────

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session for a single store operation.

        Commits when the block completes, rolls back on any exception.
        SQLAlchemy errors surface as StoreError; application errors
        (e.g. NoteValidationError) propagate unchanged.
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                if isinstance(e, DBAPIError) and e.connection_invalidated:
                    self._state = ConnectionState.DISCONNECTED
                raise StoreError(
                    context={"error_type": type(e).__name__, "error": str(e)},
                ) from e
            except Exception:
                await session.rollback()
                raise

    # ── Operations ────────────────────────────────────────────────────────

    @staticmethod
    async def _get(session: AsyncSession, key: uuid.UUID, for_update: bool = False) -> Optional[Note]:
        stmt = select(Note).where(Note.id == key)
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def find(self) -> List[NoteDocument]:
        async with self._session() as session:
            result = await session.execute(
                select(Note).order_by(Note.seq)
            )
            return [NoteDocument.model_validate(note) for note in result.scalars().all()]

    async def find_by_id(self, note_id: str) -> Optional[NoteDocument]:
        key = parse_note_id(note_id)
        async with self._session() as session:
            note = await self._get(session, key)
            if note is None:
                return None
            return NoteDocument.model_validate(note)

    async def create(self, data: Dict[str, Any]) -> NoteDocument:
        fields = validate_note_fields(data)
        now = datetime.now(timezone.utc)
        async with self._session() as session:
            note = Note(
                title=fields.title,
                content=fields.content,
                tags=list(fields.tags),
                schema_version=NOTE_SCHEMA_VERSION,
                created_at=now,
                updated_at=now,
            )
            session.add(note)
            await session.flush()
            logger.info("Note created: %s", note.id)
            return NoteDocument.model_validate(note)

    async def find_by_id_and_update(
        self, note_id: str, changes: Dict[str, Any]
    ) -> Optional[NoteDocument]:
        key = parse_note_id(note_id)
        async with self._session() as session:
            note = await self._get(session, key, for_update=True)
            if note is None:
                return None

            current = NoteDocument.model_validate(note).fields()
            merged = merge_note_fields(current, changes)

            note.title = merged.title
            note.content = merged.content
            note.tags = list(merged.tags)
            note.schema_version = NOTE_SCHEMA_VERSION
            note.updated_at = datetime.now(timezone.utc)
            await session.flush()
            logger.info("Note updated: %s (fields=%s)", note.id, sorted(changes))
            return NoteDocument.model_validate(note)

    async def find_by_id_and_delete(self, note_id: str) -> Optional[NoteDocument]:
        key = parse_note_id(note_id)
        async with self._session() as session:
            note = await self._get(session, key)
            if note is None:
                return None
            document = NoteDocument.model_validate(note)
            await session.delete(note)
            await session.flush()
            logger.info("Note deleted: %s", key)
            return document
