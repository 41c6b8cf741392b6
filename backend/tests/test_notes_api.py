"""
NoteAssist Backend — Notes API Tests
======================================

What:  End-to-end tests for the /notes endpoints through the ASGI app.
How:   HTTPX AsyncClient + ASGITransport, SQLite-backed sessions.

What we test:
    ✅ Status codes: 201, 200, 400, 401, 404
    ✅ Response envelopes and camelCase keys
    ✅ Owner isolation across two identities
    ✅ Title length boundary (200 accepted, 201 rejected)
    ✅ Request ID propagation
"""

import asyncio
from datetime import datetime
from uuid import uuid4

import pytest

from conftest import ALICE, BOB, auth


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def _create(client, user=ALICE, **fields):
    body = {"title": "A note", **fields}
    response = await client.post("/notes", json=body, headers=auth(user))
    assert response.status_code == 201, response.text
    return response.json()["note"]


class TestIdentity:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/notes"),
            ("POST", "/notes"),
            ("GET", f"/notes/{uuid4()}"),
            ("PATCH", f"/notes/{uuid4()}"),
            ("DELETE", f"/notes/{uuid4()}"),
        ],
    )
    async def test_missing_identity_is_401(self, test_client, method, path):
        response = await test_client.request(method, path, json={"title": "x"})

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_blank_identity_is_401(self, test_client):
        response = await test_client.get("/notes", headers={"X-User-Id": "   "})
        assert response.status_code == 401


class TestCreateNote:
    @pytest.mark.asyncio
    async def test_create_returns_201_with_note(self, test_client):
        response = await test_client.post(
            "/notes",
            json={"title": "Trip", "content": "<p>Pack</p>", "tags": ["travel"]},
            headers=auth(ALICE),
        )

        assert response.status_code == 201
        note = response.json()["note"]
        assert note["title"] == "Trip"
        assert note["content"] == "<p>Pack</p>"
        assert note["tags"] == ["travel"]
        assert note["ownerId"] == ALICE
        assert note["createdAt"] == note["updatedAt"]
        assert note["id"]

    @pytest.mark.asyncio
    async def test_title_of_200_chars_accepted(self, test_client):
        response = await test_client.post("/notes", json={"title": "x" * 200}, headers=auth(ALICE))
        assert response.status_code == 201

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"title": "x" * 201}, {"title": ""}, {"content": "no title"}])
    async def test_invalid_title_is_400(self, test_client, body):
        response = await test_client.post("/notes", json=body, headers=auth(ALICE))

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "validation_error"
        assert any(f["field"] == "title" for f in data["details"]["fields"])

    @pytest.mark.asyncio
    async def test_client_supplied_id_and_owner_are_ignored(self, test_client):
        response = await test_client.post(
            "/notes",
            json={"title": "T", "id": "abc", "ownerId": BOB},
            headers=auth(ALICE),
        )

        assert response.status_code == 201
        note = response.json()["note"]
        assert note["ownerId"] == ALICE
        assert note["id"] != "abc"

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client):
        response = await test_client.post(
            "/notes",
            content=b"{not json",
            headers={**auth(ALICE), "Content-Type": "application/json"},
        )
        assert response.status_code == 400


class TestListNotes:
    @pytest.mark.asyncio
    async def test_list_in_creation_order(self, test_client):
        for title in ("one", "two", "three"):
            await _create(test_client, title=title)
            await asyncio.sleep(0.01)

        response = await test_client.get("/notes", headers=auth(ALICE))

        assert response.status_code == 200
        assert response.headers["cache-control"] == "private, no-store"
        notes = response.json()["notes"]
        assert [n["title"] for n in notes] == ["one", "two", "three"]

    @pytest.mark.asyncio
    async def test_list_is_owner_scoped(self, test_client):
        await _create(test_client, user=ALICE, title="alice")
        await _create(test_client, user=BOB, title="bob")

        alice_notes = (await test_client.get("/notes", headers=auth(ALICE))).json()["notes"]
        bob_notes = (await test_client.get("/notes", headers=auth(BOB))).json()["notes"]

        assert [n["title"] for n in alice_notes] == ["alice"]
        assert [n["title"] for n in bob_notes] == ["bob"]


class TestGetNote:
    @pytest.mark.asyncio
    async def test_get_own_note(self, test_client):
        created = await _create(test_client, title="Mine")

        response = await test_client.get(f"/notes/{created['id']}", headers=auth(ALICE))

        assert response.status_code == 200
        note = response.json()["note"]
        assert note["id"] == created["id"]
        assert note["title"] == "Mine"
        assert note["updatedAt"] == created["updatedAt"]
        assert note["createdAt"] == created["createdAt"]

    @pytest.mark.asyncio
    async def test_other_owner_gets_404(self, test_client):
        created = await _create(test_client, title="Mine")

        response = await test_client.get(f"/notes/{created['id']}", headers=auth(BOB))

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_malformed_id_is_404(self, test_client):
        response = await test_client.get("/notes/not-a-uuid", headers=auth(ALICE))
        assert response.status_code == 404


class TestUpdateNote:
    @pytest.mark.asyncio
    async def test_tags_only_update(self, test_client):
        created = await _create(test_client, title="Title", content="Body", tags=["a"])
        await asyncio.sleep(0.01)

        response = await test_client.patch(
            f"/notes/{created['id']}", json={"tags": ["a", "b"]}, headers=auth(ALICE)
        )

        assert response.status_code == 200
        note = response.json()["note"]
        assert note["tags"] == ["a", "b"]
        assert note["title"] == "Title"
        assert note["content"] == "Body"
        assert note["createdAt"] == created["createdAt"]
        assert _ts(note["updatedAt"]) > _ts(created["updatedAt"])

    @pytest.mark.asyncio
    async def test_update_persists(self, test_client):
        created = await _create(test_client, title="Old")

        await test_client.patch(f"/notes/{created['id']}", json={"title": "New"}, headers=auth(ALICE))
        response = await test_client.get(f"/notes/{created['id']}", headers=auth(ALICE))

        assert response.json()["note"]["title"] == "New"

    @pytest.mark.asyncio
    async def test_other_owner_update_is_404_and_note_unchanged(self, test_client):
        created = await _create(test_client, title="Mine")

        response = await test_client.patch(
            f"/notes/{created['id']}", json={"title": "Hijacked"}, headers=auth(BOB)
        )
        assert response.status_code == 404

        fetched = await test_client.get(f"/notes/{created['id']}", headers=auth(ALICE))
        assert fetched.json()["note"]["title"] == "Mine"

    @pytest.mark.asyncio
    async def test_title_too_long_is_400(self, test_client):
        created = await _create(test_client)

        response = await test_client.patch(
            f"/notes/{created['id']}", json={"title": "y" * 201}, headers=auth(ALICE)
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body,field",
        [({"title": None}, "title"), ({"content": None}, "content"), ({"tags": None}, "tags")],
    )
    async def test_explicit_null_is_400_and_note_unchanged(self, test_client, body, field):
        created = await _create(test_client, title="Keep", content="Body", tags=["x"])

        response = await test_client.patch(f"/notes/{created['id']}", json=body, headers=auth(ALICE))

        assert response.status_code == 400
        assert [f["field"] for f in response.json()["details"]["fields"]] == [field]
        fetched = (await test_client.get(f"/notes/{created['id']}", headers=auth(ALICE))).json()["note"]
        assert (fetched["title"], fetched["content"], fetched["tags"]) == ("Keep", "Body", ["x"])
        assert fetched["updatedAt"] == created["updatedAt"]

    @pytest.mark.asyncio
    async def test_empty_body_only_refreshes_updated_at(self, test_client):
        created = await _create(test_client, title="Same")
        await asyncio.sleep(0.01)

        response = await test_client.patch(f"/notes/{created['id']}", json={}, headers=auth(ALICE))

        assert response.status_code == 200
        note = response.json()["note"]
        assert note["title"] == "Same"
        assert _ts(note["updatedAt"]) > _ts(created["updatedAt"])


class TestTimestamps:
    @pytest.mark.asyncio
    async def test_create_and_get_serialize_identically_in_utc(self, test_client):
        created = await _create(test_client)

        fetched = (await test_client.get(f"/notes/{created['id']}", headers=auth(ALICE))).json()["note"]
        listed = (await test_client.get("/notes", headers=auth(ALICE))).json()["notes"][0]

        assert created["updatedAt"].endswith("Z")
        assert fetched["createdAt"] == listed["createdAt"] == created["createdAt"]
        assert fetched["updatedAt"] == listed["updatedAt"] == created["updatedAt"]


class TestDeleteNote:
    @pytest.mark.asyncio
    async def test_delete_then_get_is_404(self, test_client):
        created = await _create(test_client)

        response = await test_client.delete(f"/notes/{created['id']}", headers=auth(ALICE))
        assert response.status_code == 200
        assert response.json() == {"message": "Note deleted successfully"}

        again = await test_client.get(f"/notes/{created['id']}", headers=auth(ALICE))
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_other_owner_delete_is_404(self, test_client):
        created = await _create(test_client)

        response = await test_client.delete(f"/notes/{created['id']}", headers=auth(BOB))
        assert response.status_code == 404

        still_there = await test_client.get(f"/notes/{created['id']}", headers=auth(ALICE))
        assert still_there.status_code == 200


class TestRequestId:
    @pytest.mark.asyncio
    async def test_generated_request_id_header(self, test_client):
        response = await test_client.get("/notes", headers=auth(ALICE))
        assert response.headers.get("X-Request-ID")

    @pytest.mark.asyncio
    async def test_client_request_id_echoed_in_error_body(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "trace-42"})

        assert response.status_code == 401
        assert response.headers["X-Request-ID"] == "trace-42"
        assert response.json()["request_id"] == "trace-42"
