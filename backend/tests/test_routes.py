"""
Mixtape Backend — HTTP Route Tests
===================================

What:  End-to-end tests through the ASGI app (middleware, handlers, routes).
How:   httpx AsyncClient with ASGITransport; the session dependency points
       at an in-memory SQLite database (see conftest.test_client).
"""

from uuid import uuid4

import pytest

SIGNUP = {
    "username": "alice",
    "email": "Alice@Example.com",
    "password": "correct-horse-battery",
}


async def create_user(client, **overrides):
    body = {**SIGNUP, **overrides}
    response = await client.post("/api/user", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestHealthRoute:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert "uptime_seconds" in data

    @pytest.mark.asyncio
    async def test_request_id_header_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"


class TestUserRoutes:

    @pytest.mark.asyncio
    async def test_signup_never_returns_password(self, test_client):
        data = await create_user(test_client)

        assert data["username"] == "alice"
        assert data["email"] == "alice@example.com"
        assert "password" not in data

    @pytest.mark.asyncio
    async def test_duplicate_signup_conflict(self, test_client):
        await create_user(test_client)

        response = await test_client.post("/api/user", json=SIGNUP)

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_signup_invalid_body(self, test_client):
        response = await test_client.post("/api/user", json={**SIGNUP, "password": "short"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_get_user(self, test_client):
        created = await create_user(test_client)

        response = await test_client.get(f"/api/user/{created['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]
        assert "password" not in response.json()

    @pytest.mark.asyncio
    async def test_get_missing_user_404(self, test_client):
        response = await test_client.get(f"/api/user/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_list_with_email_filter(self, test_client):
        await create_user(test_client)
        await create_user(test_client, username="bob", email="bob@example.com")

        everyone = await test_client.get("/api/user")
        only_bob = await test_client.get("/api/user", params={"email": "bob@example.com"})

        assert everyone.json()["total"] == 2
        assert only_bob.json()["total"] == 1
        assert only_bob.json()["users"][0]["username"] == "bob"
        assert "password" not in only_bob.json()["users"][0]

    @pytest.mark.asyncio
    async def test_list_by_signup_email_spelling(self, test_client):
        created = await create_user(test_client)

        response = await test_client.get("/api/user", params={"email": SIGNUP["email"]})

        assert response.json()["total"] == 1
        assert response.json()["users"][0]["id"] == created["id"]

    @pytest.mark.asyncio
    async def test_update_user(self, test_client):
        created = await create_user(test_client)

        response = await test_client.put(
            f"/api/user/{created['id']}", json={"img_url": "https://img.example.com/a.png"}
        )

        assert response.status_code == 200
        assert response.json()["img_url"] == "https://img.example.com/a.png"

    @pytest.mark.asyncio
    async def test_empty_update_returns_user_unchanged(self, test_client):
        created = await create_user(test_client)

        response = await test_client.put(f"/api/user/{created['id']}", json={})

        assert response.status_code == 200
        data = response.json()
        for key in ("id", "username", "email", "img_url", "is_admin"):
            assert data[key] == created[key]

    @pytest.mark.asyncio
    async def test_blank_password_update_400(self, test_client):
        created = await create_user(test_client)

        response = await test_client.put(
            f"/api/user/{created['id']}", json={"password": " " * 10}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_delete_user(self, test_client):
        created = await create_user(test_client)

        response = await test_client.delete(f"/api/user/{created['id']}")
        follow_up = await test_client.get(f"/api/user/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert follow_up.status_code == 404

    @pytest.mark.asyncio
    async def test_detailed_user_backfills_likes_playlist(self, test_client):
        created = await create_user(test_client)

        first = await test_client.get(f"/api/user/{created['id']}/detailed")
        second = await test_client.get(f"/api/user/{created['id']}/detailed")

        assert first.status_code == 200
        body = first.json()
        assert body["liked_songs_playlist"]["name"] == "Liked Songs"
        assert body["playlists"] == []
        assert "password" not in body
        assert second.json()["liked_songs_playlist"]["id"] == body["liked_songs_playlist"]["id"]

    @pytest.mark.asyncio
    async def test_detailed_missing_user_404(self, test_client):
        response = await test_client.get(f"/api/user/{uuid4()}/detailed")
        assert response.status_code == 404


class TestPlaylistRoutes:

    @pytest.mark.asyncio
    async def test_create_and_get_playlist(self, test_client):
        owner = await create_user(test_client)

        created = await test_client.post(
            "/api/playlist", json={"owner_id": owner["id"], "name": "Road Trip", "is_public": True}
        )
        assert created.status_code == 201
        playlist_id = created.json()["id"]

        response = await test_client.get(
            f"/api/playlist/{playlist_id}", params={"viewer_id": owner["id"]}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Road Trip"
        assert response.json()["is_liked"] is False

    @pytest.mark.asyncio
    async def test_missing_playlist_404(self, test_client):
        response = await test_client.get(f"/api/playlist/{uuid4()}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_create_playlist_for_unknown_owner_404(self, test_client):
        response = await test_client.post(
            "/api/playlist", json={"owner_id": str(uuid4()), "name": "Orphan"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
