"""
Notekeep Backend: Notes API Tests
==================================

What:  End-to-end tests of the /notes endpoints over ASGI.
How:   HTTPX AsyncClient against an app wired to an InMemoryNoteStore.

What we test:
    ✅ Create → get round trip with assigned id
    ✅ Delete → get yields 404
    ✅ Partial update keeps unspecified fields
    ✅ Listing reflects creates and deletes
    ✅ 404 vs 400 separation for single-note operations
    ✅ Invalid bodies and store exceptions collapse to 400 {"status": "fail"}
    ✅ Unexpected errors outside the note routes still answer 400 with headers
"""

import pytest
from httpx import ASGITransport, AsyncClient
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

from notekeep.main import create_app


async def create(client, **fields):
    response = await client.post("/notes", json=fields)
    assert response.status_code == 201, response.text
    return response.json()["note"]


class TestCreateAndGet:

    @pytest.mark.asyncio
    async def test_create_then_get_returns_same_fields(self, test_client, sample_note_data):
        created = await create(test_client, **sample_note_data)

        assert UUID(created["id"])
        response = await test_client.get(f"/notes/{created['id']}")

        assert response.status_code == 200
        note = response.json()["note"]
        assert note["id"] == created["id"]
        assert note["title"] == sample_note_data["title"]
        assert note["content"] == sample_note_data["content"]
        assert note["tags"] == sample_note_data["tags"]
        assert note["schema_version"] == 1

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, test_client):
        note = await create(test_client, title="Only a title")

        assert note["content"] == ""
        assert note["tags"] == []

    @pytest.mark.asyncio
    async def test_create_assigns_unique_ids(self, test_client):
        first = await create(test_client, title="a")
        second = await create(test_client, title="b")

        assert first["id"] != second["id"]

    @pytest.mark.asyncio
    async def test_create_missing_title_fails(self, test_client):
        response = await test_client.post("/notes", json={"content": "no title"})

        assert response.status_code == 400
        assert response.json() == {"status": "fail"}

    @pytest.mark.asyncio
    async def test_create_unknown_field_fails(self, test_client):
        response = await test_client.post("/notes", json={"title": "x", "color": "red"})

        assert response.status_code == 400
        assert response.json() == {"status": "fail"}

    @pytest.mark.asyncio
    async def test_create_non_object_body_fails(self, test_client):
        response = await test_client.post("/notes", json=["not", "an", "object"])

        assert response.status_code == 400
        assert response.json() == {"status": "fail"}

    @pytest.mark.asyncio
    async def test_create_title_too_long_fails(self, test_client):
        response = await test_client.post("/notes", json={"title": "x" * 201})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_get_unknown_id_is_404(self, test_client):
        response = await test_client.get(f"/notes/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"message": "Note not found"}

    @pytest.mark.asyncio
    async def test_get_malformed_id_is_400(self, test_client):
        response = await test_client.get("/notes/not-a-uuid")

        assert response.status_code == 400
        assert response.json() == {"status": "fail"}


class TestUpdate:

    @pytest.mark.asyncio
    async def test_partial_update_preserves_other_fields(self, test_client, sample_note_data):
        created = await create(test_client, **sample_note_data)

        response = await test_client.patch(
            f"/notes/{created['id']}", json={"content": "Milk only"}
        )

        assert response.status_code == 200
        note = response.json()["note"]
        assert note["id"] == created["id"]
        assert note["content"] == "Milk only"
        assert note["title"] == sample_note_data["title"]
        assert note["tags"] == sample_note_data["tags"]

        fetched = (await test_client.get(f"/notes/{created['id']}")).json()["note"]
        assert fetched["content"] == "Milk only"

    @pytest.mark.asyncio
    async def test_update_validates_merged_document(self, test_client):
        created = await create(test_client, title="Keep me")

        response = await test_client.patch(f"/notes/{created['id']}", json={"title": "   "})

        assert response.status_code == 400
        assert response.json() == {"status": "fail"}
        fetched = (await test_client.get(f"/notes/{created['id']}")).json()["note"]
        assert fetched["title"] == "Keep me"

    @pytest.mark.asyncio
    async def test_update_null_title_fails(self, test_client):
        created = await create(test_client, title="Keep me")

        response = await test_client.patch(f"/notes/{created['id']}", json={"title": None})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_invalid_json_fails(self, test_client):
        created = await create(test_client, title="Draft")

        response = await test_client.patch(
            f"/notes/{created['id']}",
            content=b'{"title": "unterminated',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"status": "fail"}
        unchanged = await test_client.get(f"/notes/{created['id']}")
        assert unchanged.json()["note"]["title"] == "Draft"

    @pytest.mark.asyncio
    async def test_update_unknown_id_is_404(self, test_client):
        response = await test_client.patch(f"/notes/{uuid4()}", json={"title": "x"})

        assert response.status_code == 404
        assert response.json() == {"message": "Note not found"}


class TestDeleteAndList:

    @pytest.mark.asyncio
    async def test_delete_then_get_is_404(self, test_client):
        created = await create(test_client, title="Temporary")

        response = await test_client.delete(f"/notes/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"status": "success"}

        response = await test_client.get(f"/notes/{created['id']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_twice_is_404(self, test_client):
        created = await create(test_client, title="Temporary")
        await test_client.delete(f"/notes/{created['id']}")

        response = await test_client.delete(f"/notes/{created['id']}")

        assert response.status_code == 404
        assert response.json() == {"message": "Note not found"}

    @pytest.mark.asyncio
    async def test_list_reflects_creates_and_deletes(self, test_client):
        kept = await create(test_client, title="kept")
        removed = await create(test_client, title="removed")
        also_kept = await create(test_client, title="also kept")
        await test_client.delete(f"/notes/{removed['id']}")

        response = await test_client.get("/notes")

        assert response.status_code == 200
        ids = [n["id"] for n in response.json()["notes"]]
        assert ids == [kept["id"], also_kept["id"]]

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert response.json() == {"notes": []}


class TestStoreFailures:
    """A store exception on any operation must produce 400 fail."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method_name, http_method, path, body",
        [
            ("find", "GET", "/notes", None),
            ("find_by_id", "GET", "/notes/{id}", None),
            ("create", "POST", "/notes", {"title": "x"}),
            ("find_by_id_and_update", "PATCH", "/notes/{id}", {"title": "x"}),
            ("find_by_id_and_delete", "DELETE", "/notes/{id}", None),
        ],
    )
    async def test_store_exception_is_400(
        self, test_client, memory_store, method_name, http_method, path, body
    ):
        setattr(memory_store, method_name, AsyncMock(side_effect=RuntimeError("store exploded")))

        response = await test_client.request(
            http_method, path.format(id=uuid4()), json=body
        )

        assert response.status_code == 400
        assert response.json() == {"status": "fail"}


class TestCrossCutting:

    @pytest.mark.asyncio
    async def test_request_id_header_is_set(self, test_client):
        response = await test_client.get("/notes")

        assert response.headers.get("X-Request-ID")

    @pytest.mark.asyncio
    async def test_client_request_id_is_echoed(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_cors_allows_any_origin(self, test_client):
        response = await test_client.get("/notes", headers={"Origin": "http://example.com"})

        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_fail_with_headers(self, memory_store):
        app = create_app(memory_store)

        async def explode():
            raise RuntimeError("unexpected")

        app.add_api_route("/explode", explode, methods=["GET"])
        # The server-error middleware re-raises after sending the handler's response
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get(
                "/explode",
                headers={"X-Request-ID": "trace-500", "Origin": "http://example.com"},
            )

        assert response.status_code == 400
        assert response.json() == {"status": "fail"}
        assert response.headers["X-Request-ID"] == "trace-500"
        assert response.headers["access-control-allow-origin"] == "*"
