"""
Notekeep Backend: Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the test suite.
How:   The app is built with an injected InMemoryNoteStore and exercised
       through an HTTPX AsyncClient over ASGITransport (no server, no DB).
       SqlNoteStore tests run against a throwaway sqlite+aiosqlite file.

Fixtures (function-scoped):
    ├── memory_store:  connected InMemoryNoteStore
    ├── test_app:      FastAPI app wired to memory_store
    ├── test_client:   AsyncClient for test_app
    ├── sql_store:     connected SqlNoteStore on a temp SQLite file
    ├── mock_store:    AsyncMock standing in for any NoteStore
    └── sample_note_data: a valid create payload
"""

import os

# Settings are read at import time; point them at SQLite before importing notekeep
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notekeep.main import create_app
from notekeep.store import InMemoryNoteStore, NoteStore, SqlNoteStore


@pytest_asyncio.fixture
async def memory_store():
    """A connected in-memory store, discarded after each test."""
    store = InMemoryNoteStore()
    await store.connect()
    yield store
    await store.close()


@pytest.fixture
def test_app(memory_store):
    return create_app(memory_store)


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient routed directly into the FastAPI app.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/notes")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    """SqlNoteStore on a fresh SQLite file with the schema created."""
    store = SqlNoteStore(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}", create_schema=True)
    await store.connect()
    yield store
    await store.close()


@pytest.fixture
def mock_store():
    """
    An AsyncMock satisfying the NoteStore interface.

    Usage:
        mock_store.find_by_id.return_value = None
        with pytest.raises(NotFoundError):
            await NoteService(mock_store).get_note(str(uuid4()))
    """
    store = AsyncMock(spec=NoteStore)
    return store


@pytest.fixture
def sample_note_data():
    return {
        "title": "Groceries",
        "content": "Milk, eggs, bread",
        "tags": ["home", "errands"],
    }
