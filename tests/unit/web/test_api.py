"""Tests for the alias store HTTP API."""

import pytest
from pymongo.errors import PyMongoError

MASTER_KEY = "test-master-key"
AUTH = {"X-Master-Key": MASTER_KEY}


async def share(client, alias="my-note", data="token", title="Title"):
    return await client.post("/api/share", json={"alias": alias, "data": data, "title": title})


class TestShare:
    """Tests for POST /api/share."""

    async def test_share_success(self, client, aliases):
        """Test storing a note under an alias."""
        response = await share(client)

        assert response.status_code == 200
        assert response.json() == {"success": True, "alias": "my-note", "url": "/my-note"}
        assert aliases.docs["my-note"]["token"] == "token"

    async def test_minimum_length_alias(self, client):
        """Test that a two-character alias is accepted and a single character is not."""
        assert (await share(client, alias="ab")).status_code == 200

        response = await share(client, alias="a")
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["type"] == "validation_error"

    async def test_uppercase_alias_rejected(self, client, aliases):
        """Test that the server does not accept or lowercase uppercase aliases."""
        response = await share(client, alias="My-Note")
        assert response.status_code == 400
        assert aliases.docs == {}

    @pytest.mark.parametrize("body", [{"data": "token"}, {"alias": "my-note"}, {}])
    async def test_missing_fields(self, client, body):
        """Test that missing alias or data is a 400."""
        response = await client.post("/api/share", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "Missing alias or data"

    async def test_malformed_body(self, client):
        """Test that a non-JSON body is a 400, not a 422."""
        response = await client.post("/api/share", content=b"not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400

    async def test_storage_error(self, client, aliases):
        """Test that a storage failure is a 500 with a JSON body."""
        aliases.fail_with = PyMongoError("down")
        response = await share(client)
        assert response.status_code == 500
        assert response.json()["type"] == "internal_server_error"


class TestGetNote:
    """Tests for GET /api/note/{alias}."""

    async def test_get_returns_token_and_counts_views(self, client, app_instance):
        """Test that reads return the stored token and increment views."""
        await share(client, data="the-token", title="Hi")

        first = await client.get("/api/note/my-note")
        await app_instance._core.services.alias.drain()
        second = await client.get("/api/note/my-note")

        assert first.status_code == 200
        body = first.json()
        assert body["success"] is True
        assert body["data"] == "the-token"
        assert body["title"] == "Hi"
        assert "createdAt" in body
        assert body["views"] == 1
        assert second.json()["views"] == 2

    async def test_unknown_alias(self, client):
        """Test that an unknown alias is a 404."""
        response = await client.get("/api/note/missing")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Note not found", "type": "not_found"}

    async def test_storage_error(self, client, aliases):
        """Test that a storage failure is a 500, distinct from not found."""
        aliases.fail_with = PyMongoError("down")
        response = await client.get("/api/note/my-note")
        assert response.status_code == 500


class TestDeleteNote:
    """Tests for DELETE /api/note/{alias}."""

    async def test_delete_with_key(self, client, aliases):
        """Test deleting with the shared secret."""
        await share(client)
        response = await client.delete("/api/note/my-note", headers=AUTH)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert aliases.docs == {}

    async def test_delete_absent_is_success(self, client):
        """Test that deleting a non-existent alias succeeds."""
        response = await client.delete("/api/note/never-existed", headers=AUTH)
        assert response.status_code == 200
        assert response.json() == {"success": True}

    @pytest.mark.parametrize("headers", [{}, {"X-Master-Key": "wrong"}])
    async def test_delete_unauthorized(self, client, aliases, headers):
        """Test that missing and wrong keys get the same 401 and leave the store unchanged."""
        await share(client)
        response = await client.delete("/api/note/my-note", headers=headers)

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Unauthorized", "type": "authentication_error"}
        assert "my-note" in aliases.docs


class TestList:
    """Tests for GET /api/list."""

    async def test_list_with_key(self, client):
        """Test listing all aliases."""
        await share(client, alias="one", title="One")
        await share(client, alias="two", title="Two")
        response = await client.get("/api/list", headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert sorted(n["alias"] for n in body["notes"]) == ["one", "two"]
        assert set(body["notes"][0]) == {"alias", "title", "createdAt", "views"}

    async def test_list_empty(self, client):
        """Test listing an empty store."""
        response = await client.get("/api/list", headers=AUTH)
        assert response.json() == {"success": True, "notes": []}

    @pytest.mark.parametrize("headers", [{}, {"X-Master-Key": "wrong"}])
    async def test_list_unauthorized(self, client, headers):
        """Test that listing requires the shared secret."""
        response = await client.get("/api/list", headers=headers)
        assert response.status_code == 401


class TestCheck:
    """Tests for GET /api/check/{alias}."""

    async def test_check(self, client):
        """Test availability before and after sharing."""
        assert (await client.get("/api/check/my-note")).json() == {"available": True, "alias": "my-note"}
        await share(client)
        assert (await client.get("/api/check/my-note")).json() == {"available": False, "alias": "my-note"}

    async def test_storage_error(self, client, aliases):
        """Test that a storage failure is a 500."""
        aliases.fail_with = PyMongoError("down")
        assert (await client.get("/api/check/my-note")).status_code == 500


class TestCors:
    """Tests for cross-origin headers."""

    async def test_preflight(self, client):
        """Test that preflight requests from any origin are allowed."""
        response = await client.options(
            "/api/note/my-note",
            headers={"Origin": "https://elsewhere.example", "Access-Control-Request-Method": "DELETE"},
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    async def test_simple_request(self, client):
        """Test that responses carry the permissive origin header."""
        response = await client.get("/api/check/my-note", headers={"Origin": "https://elsewhere.example"})
        assert response.headers["access-control-allow-origin"] == "*"


async def test_health(client):
    """Test the health endpoint."""
    response = await client.get("/health")
    assert response.json() == {"status": "healthy"}
