"""
Notekeep Backend: Note SQLAlchemy Model
========================================

What:  ORM model for the `notes` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   Used by SqlNoteStore.

Table Design:
    - seq: integer primary key in insertion order; listing sorts on it
    - id: public UUID assigned by the store at insert time (unique)
    - title / content / tags hold the versioned field set (schema_version)
    - tags is JSON (JSONB on PostgreSQL)
    - created_at / updated_at are timezone-aware UTC
    - server defaults match migration 001 so autogenerate sees no drift
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text, UniqueConstraint, Uuid, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from notekeep.database import Base
from notekeep.schemas.note import CONTENT_MAX_LENGTH, NOTE_SCHEMA_VERSION, TITLE_MAX_LENGTH


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A note row.

    Lifecycle:
        1. Inserted by SqlNoteStore.create() with a fresh uuid4
        2. Updated in place by find_by_id_and_update() (updated_at bumped)
        3. Deleted by find_by_id_and_delete(); the id is never reused
    """

    __tablename__ = "notes"

    seq: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Insertion sequence; defines listing order",
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        default=uuid.uuid4,
        comment="Store-assigned note identifier",
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
        comment="Note title",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
        comment=f"Note body (at most {CONTENT_MAX_LENGTH} characters)",
    )

    tags: Mapped[List[str]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
        server_default=text("'[]'"),
        comment="Free-form labels",
    )

    schema_version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=NOTE_SCHEMA_VERSION,
        server_default=text(str(NOTE_SCHEMA_VERSION)),
        comment="Version of the note field contract this row was written with",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was last modified (UTC)",
    )

    __table_args__ = (
        UniqueConstraint("id", name="uq_notes_id"),
        Index("idx_notes_created_at", created_at),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Note(seq={self.seq}, id={self.id}, title='{self.title}', created_at='{self.created_at}')>"
