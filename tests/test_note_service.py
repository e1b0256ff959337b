"""
Notekeep Backend: Note Service Unit Tests
==========================================

What:  Tests for NoteService (list, get, create, update, delete).
How:   Uses an AsyncMock store; no database or HTTP.

What we test:
    ✅ Store results pass straight through
    ✅ None from single-document calls becomes NotFoundError
    ✅ Unexpected store exceptions become OperationFailedError
    ✅ Application errors from the store propagate unchanged
"""

import pytest
from datetime import datetime, timezone
from uuid import uuid4

from notekeep.exceptions import (
    InvalidIdentifierError,
    NoteValidationError,
    NotFoundError,
    OperationFailedError,
)
from notekeep.schemas.note import NoteDocument
from notekeep.services.note_service import NoteService


def make_document(**overrides) -> NoteDocument:
    now = datetime.now(timezone.utc)
    data = {
        "id": uuid4(),
        "title": "Groceries",
        "content": "Milk",
        "tags": [],
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return NoteDocument(**data)


class TestNoteServiceList:
    """Tests for list_notes."""

    @pytest.mark.asyncio
    async def test_list_notes_returns_store_order(self, mock_store):
        docs = [make_document(title="first"), make_document(title="second")]
        mock_store.find.return_value = docs

        result = await NoteService(mock_store).list_notes()

        assert [n.title for n in result] == ["first", "second"]
        mock_store.find.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_notes_empty(self, mock_store):
        mock_store.find.return_value = []

        assert await NoteService(mock_store).list_notes() == []

    @pytest.mark.asyncio
    async def test_list_notes_store_failure(self, mock_store):
        mock_store.find.side_effect = RuntimeError("connection reset")

        with pytest.raises(OperationFailedError) as exc_info:
            await NoteService(mock_store).list_notes()

        assert exc_info.value.context["error_type"] == "RuntimeError"


class TestNoteServiceGet:
    """Tests for get_note."""

    @pytest.mark.asyncio
    async def test_get_note_found(self, mock_store):
        doc = make_document()
        mock_store.find_by_id.return_value = doc

        result = await NoteService(mock_store).get_note(str(doc.id))

        assert result == doc
        mock_store.find_by_id.assert_awaited_once_with(str(doc.id))

    @pytest.mark.asyncio
    async def test_get_note_not_found(self, mock_store):
        mock_store.find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await NoteService(mock_store).get_note(str(uuid4()))

    @pytest.mark.asyncio
    async def test_get_note_invalid_id_propagates(self, mock_store):
        mock_store.find_by_id.side_effect = InvalidIdentifierError("abc")

        with pytest.raises(InvalidIdentifierError):
            await NoteService(mock_store).get_note("abc")

    @pytest.mark.asyncio
    async def test_get_note_store_failure(self, mock_store):
        mock_store.find_by_id.side_effect = ConnectionError("down")

        with pytest.raises(OperationFailedError):
            await NoteService(mock_store).get_note(str(uuid4()))


class TestNoteServiceCreate:
    """Tests for create_note."""

    @pytest.mark.asyncio
    async def test_create_note_passes_fields_through(self, mock_store, sample_note_data):
        doc = make_document(**sample_note_data)
        mock_store.create.return_value = doc

        result = await NoteService(mock_store).create_note(sample_note_data)

        assert result.id == doc.id
        mock_store.create.assert_awaited_once_with(sample_note_data)

    @pytest.mark.asyncio
    async def test_create_note_validation_error_propagates(self, mock_store):
        mock_store.create.side_effect = NoteValidationError()

        with pytest.raises(NoteValidationError):
            await NoteService(mock_store).create_note({"title": ""})

    @pytest.mark.asyncio
    async def test_create_note_store_failure(self, mock_store, sample_note_data):
        mock_store.create.side_effect = Exception("disk full")

        with pytest.raises(OperationFailedError):
            await NoteService(mock_store).create_note(sample_note_data)


class TestNoteServiceUpdate:
    """Tests for update_note."""

    @pytest.mark.asyncio
    async def test_update_note_returns_post_update_state(self, mock_store):
        doc = make_document(title="Renamed")
        mock_store.find_by_id_and_update.return_value = doc

        result = await NoteService(mock_store).update_note(str(doc.id), {"title": "Renamed"})

        assert result.title == "Renamed"
        mock_store.find_by_id_and_update.assert_awaited_once_with(str(doc.id), {"title": "Renamed"})

    @pytest.mark.asyncio
    async def test_update_note_not_found(self, mock_store):
        mock_store.find_by_id_and_update.return_value = None

        with pytest.raises(NotFoundError):
            await NoteService(mock_store).update_note(str(uuid4()), {"title": "x"})

    @pytest.mark.asyncio
    async def test_update_note_store_failure(self, mock_store):
        mock_store.find_by_id_and_update.side_effect = RuntimeError("boom")

        with pytest.raises(OperationFailedError) as exc_info:
            await NoteService(mock_store).update_note("some-id", {"title": "x"})

        assert exc_info.value.context["note_id"] == "some-id"


class TestNoteServiceDelete:
    """Tests for delete_note."""

    @pytest.mark.asyncio
    async def test_delete_note_returns_removed_document(self, mock_store):
        doc = make_document()
        mock_store.find_by_id_and_delete.return_value = doc

        result = await NoteService(mock_store).delete_note(str(doc.id))

        assert result.id == doc.id

    @pytest.mark.asyncio
    async def test_delete_note_not_found(self, mock_store):
        mock_store.find_by_id_and_delete.return_value = None

        with pytest.raises(NotFoundError):
            await NoteService(mock_store).delete_note(str(uuid4()))
