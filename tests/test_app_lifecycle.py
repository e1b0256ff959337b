"""
Notekeep Backend: Application Lifecycle Tests
==============================================

What:  Startup connects the injected store; a connection failure aborts
       startup; shutdown closes the store.
"""

import pytest
from unittest.mock import AsyncMock

from notekeep.exceptions import StoreConnectionError
from notekeep.main import create_app
from notekeep.store import ConnectionState, InMemoryNoteStore


class TestLifespan:

    @pytest.mark.asyncio
    async def test_startup_connects_and_shutdown_closes(self):
        store = InMemoryNoteStore()
        app = create_app(store)

        async with app.router.lifespan_context(app):
            assert store.state == ConnectionState.CONNECTED

        assert store.state == ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_startup_fails_when_store_unreachable(self):
        store = InMemoryNoteStore()
        store.connect = AsyncMock(side_effect=StoreConnectionError())
        app = create_app(store)

        with pytest.raises(StoreConnectionError):
            async with app.router.lifespan_context(app):
                pass

        assert store.state == ConnectionState.DISCONNECTED

    def test_store_is_injected_into_app_state(self):
        store = InMemoryNoteStore()

        app = create_app(store)

        assert app.state.note_store is store
