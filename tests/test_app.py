"""
Tests for the FastAPI application.

The app is started through its lifespan with a temporary SQLite database.
"""

import pytest
from fastapi.testclient import TestClient

import app as app_module

USER = {"X-User-Id": "user-1"}
OTHER = {"X-User-Id": "user-2"}


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Create a test client backed by a fresh database."""
    monkeypatch.setenv("THREADNOTES_DB_PATH", str(tmp_path / "api.db"))
    monkeypatch.setenv("THREADNOTES_LOG_TO_FILE", "false")
    monkeypatch.chdir(tmp_path)

    with TestClient(app_module.app) as test_client:
        yield test_client


def _create(client, content="hello", thread_id="thread-1", headers=USER, **extra):
    response = client.post(
        "/notes", json={"thread_id": thread_id, "content": content, **extra}, headers=headers
    )
    assert response.status_code == 201
    return response.json()


class TestHealth:
    """Test health and root endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "store_initialized": True}

    def test_root(self, client):
        assert client.get("/").json()["name"] == "ThreadNotes API"


class TestNotesApi:
    """Test note endpoints."""

    def test_create_and_list(self, client):
        """Test created notes appear in the caller's listing only."""
        first = _create(client, "a")
        second = _create(client, "b", color="blue")
        _create(client, "c", headers=OTHER)

        assert first["order"] == 0
        assert second["order"] == 1
        assert second["color"] == "blue"

        listed = client.get("/notes", headers=USER).json()
        assert [note["id"] for note in listed] == [first["id"], second["id"]]

    def test_list_thread_notes(self, client):
        """Test thread filtering."""
        in_thread = _create(client, "a", thread_id="thread-1")
        _create(client, "b", thread_id="thread-2")

        listed = client.get("/threads/thread-1/notes", headers=USER).json()

        assert [note["id"] for note in listed] == [in_thread["id"]]

    def test_missing_user_header(self, client):
        """Test requests without an identity are rejected."""
        assert client.get("/notes").status_code == 422

    def test_patch(self, client):
        """Test partial update."""
        note = _create(client, "before")

        response = client.patch(f"/notes/{note['id']}", json={"is_pinned": True}, headers=USER)

        assert response.status_code == 200
        body = response.json()
        assert body["is_pinned"] is True
        assert body["content"] == "before"

    def test_patch_foreign_note(self, client):
        """Test updating another user's note returns 404."""
        note = _create(client, headers=OTHER)

        response = client.patch(f"/notes/{note['id']}", json={"content": "x"}, headers=USER)

        assert response.status_code == 404

    def test_patch_immutable_field(self, client):
        """Test identity fields are rejected."""
        note = _create(client)

        response = client.patch(f"/notes/{note['id']}", json={"user_id": "user-2"}, headers=USER)

        assert response.status_code == 422

    def test_delete(self, client):
        """Test delete and repeated delete."""
        note = _create(client)

        assert client.delete(f"/notes/{note['id']}", headers=USER).json() == {"success": True}
        assert client.delete(f"/notes/{note['id']}", headers=USER).status_code == 404
        assert client.get("/notes", headers=USER).json() == []

    def test_reorder(self, client):
        """Test batch reorder."""
        a = _create(client, "a")
        b = _create(client, "b")

        response = client.post(
            "/notes/reorder",
            json={"notes": [{"id": a["id"], "order": 1}, {"id": b["id"], "order": 0}]},
            headers=USER,
        )

        assert response.json() == {"success": True}
        listed = client.get("/notes", headers=USER).json()
        assert [note["id"] for note in listed] == [b["id"], a["id"]]

    def test_reorder_foreign_note(self, client):
        """Test reorder with a foreign note returns 403 with offending IDs."""
        a = _create(client, "a")
        b = _create(client, "b", headers=OTHER)

        response = client.post(
            "/notes/reorder",
            json={"notes": [{"id": a["id"], "order": 1}, {"id": b["id"], "order": 0}]},
            headers=USER,
        )

        assert response.status_code == 403
        assert response.json()["note_ids"] == [b["id"]]

    def test_user_id_with_braces(self, client):
        """Test a user ID containing braces goes through create, list and 404 paths."""
        headers = {"X-User-Id": "user-{1}"}
        note = _create(client, "x", thread_id="thread-{0}", headers=headers)

        assert [n["id"] for n in client.get("/notes", headers=headers).json()] == [note["id"]]
        assert client.delete("/notes/missing-{x}", headers=headers).status_code == 404

    def test_order_out_of_range(self, client):
        """Test orders outside the storable integer range return 422."""
        note = _create(client)

        patch = client.patch(f"/notes/{note['id']}", json={"order": 2**63}, headers=USER)
        reorder = client.post(
            "/notes/reorder", json={"notes": [{"id": note["id"], "order": 2**63}]}, headers=USER
        )

        assert patch.status_code == 422
        assert reorder.status_code == 422
        assert client.get("/notes", headers=USER).json()[0]["order"] == 0
