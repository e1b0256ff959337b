"""
Notekeep Backend: Note Request/Response Schemas
================================================

What:  Pydantic models defining the note API contract and the field rules
       every stored note must satisfy.
How:   FastAPI validates request bodies against NoteCreate/NoteUpdate; the
       store re-validates the full document (NoteFields) on every write, so
       an update is checked against the merged result, not just the patch.
Who:   Used by routes, NoteService and both store adapters.

Field contract (schema version 1):
    title:  required string, surrounding whitespace stripped, 1-200 chars
    content: optional string, at most 10 000 chars, default ""
    tags:   optional list of at most 20 strings, each 1-50 chars after strip
    Unknown fields are rejected.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from notekeep.exceptions import NoteValidationError

NOTE_SCHEMA_VERSION = 1

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 10_000
MAX_TAGS = 20
TAG_MAX_LENGTH = 50


# ══════════════════════════════════════════════════════════════════════════
# Field Contract: what a stored note must look like
# ══════════════════════════════════════════════════════════════════════════


class NoteFields(BaseModel):
    """The user-editable fields of a note, fully validated."""

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH, description="Note title")
    content: str = Field(default="", max_length=CONTENT_MAX_LENGTH, description="Note body")
    tags: List[str] = Field(default_factory=list, max_length=MAX_TAGS, description="Free-form labels")

    model_config = {"extra": "forbid"}

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        """Strips each tag and enforces the per-tag length limit."""
        cleaned = []
        for tag in v:
            tag = tag.strip()
            if not tag or len(tag) > TAG_MAX_LENGTH:
                raise ValueError(f"Each tag must be 1-{TAG_MAX_LENGTH} characters")
            cleaned.append(tag)
        return cleaned


class NoteCreate(NoteFields):
    """Request body for POST /notes."""


class NoteUpdate(BaseModel):
    """
    Request body for PATCH /notes/{id}.

    Every field is optional; only the fields the client sent are applied
    (`model_dump(exclude_unset=True)`). Constraints are checked by the store
    against the merged document.
    """

    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None

    model_config = {"extra": "forbid"}


def validate_note_fields(data: Dict[str, Any]) -> NoteFields:
    """
    Validate a complete field set.

    Raises:
        NoteValidationError: the data violates the field contract
    """
    try:
        return NoteFields.model_validate(data)
    except ValidationError as e:
        raise NoteValidationError(
            errors=e.errors(include_url=False, include_context=False, include_input=False),
        ) from e


def merge_note_fields(current: NoteFields, changes: Dict[str, Any]) -> NoteFields:
    """
    Apply a partial update to an existing field set and re-validate the result.

    Fields absent from `changes` keep their current values.

    Raises:
        NoteValidationError: the merged document violates the field contract
    """
    merged = current.model_dump()
    merged.update(changes)
    return validate_note_fields(merged)


# ══════════════════════════════════════════════════════════════════════════
# Stored Document: what the store hands back
# ══════════════════════════════════════════════════════════════════════════


class NoteDocument(BaseModel):
    """A persisted note: its fields plus store-managed metadata."""

    id: uuid.UUID = Field(description="Store-assigned identifier")
    title: str
    content: str
    tags: List[str]
    schema_version: int = Field(default=NOTE_SCHEMA_VERSION, description="Field contract version")
    created_at: datetime = Field(description="Creation time (UTC)")
    updated_at: datetime = Field(description="Last modification time (UTC)")

    model_config = {"from_attributes": True}

    def fields(self) -> NoteFields:
        return NoteFields(title=self.title, content=self.content, tags=list(self.tags))


# ══════════════════════════════════════════════════════════════════════════
# Response Envelopes
# ══════════════════════════════════════════════════════════════════════════


class NoteEnvelope(BaseModel):
    """Returned by get, create and update: {"note": {...}}."""
    note: NoteDocument


class NoteListEnvelope(BaseModel):
    """Returned by GET /notes: {"notes": [...]}."""
    notes: List[NoteDocument]


class StatusResponse(BaseModel):
    """{"status": "success"} after a delete, {"status": "fail"} on failure."""
    status: str


class MessageResponse(BaseModel):
    """{"message": "Note not found"}."""
    message: str
