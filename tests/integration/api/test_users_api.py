"""Integration tests for user sync, onboarding and profile endpoints."""

from httpx import AsyncClient

from tests.conftest import ActingUser


class TestSyncUser:
    async def test_first_sync_creates_profile(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post("/api/v1/users/sync")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["external_ref"] == "did:privy:test-user"
        assert data["email"] == "test@example.com"
        assert data["name"] == "Test User"
        assert data["role"] is None
        assert data["is_onboarded"] is False

    async def test_resync_keeps_id_and_stored_values(
        self, authenticated_client: AsyncClient, acting: ActingUser
    ) -> None:
        first = (await authenticated_client.post("/api/v1/users/sync")).json()["data"]

        acting.act_as("did:privy:test-user", email=None, name="Renamed")
        second = (await authenticated_client.post("/api/v1/users/sync")).json()["data"]

        assert second["id"] == first["id"]
        assert second["name"] == "Renamed"
        assert second["email"] == "test@example.com"

    async def test_profile_requires_sync(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.get("/api/v1/users/me")

        assert response.status_code == 404
        assert response.json()["error_code"] == "PROFILE_NOT_FOUND"


class TestOnboarding:
    async def test_choosing_a_role_completes_onboarding(
        self, authenticated_client: AsyncClient
    ) -> None:
        await authenticated_client.post("/api/v1/users/sync")

        response = await authenticated_client.put(
            "/api/v1/users/me/role", json={"role": "curator"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["role"] == "curator"
        assert data["is_onboarded"] is True

    async def test_unknown_role_is_rejected(self, authenticated_client: AsyncClient) -> None:
        await authenticated_client.post("/api/v1/users/sync")

        response = await authenticated_client.put("/api/v1/users/me/role", json={"role": "admin"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_ROLE"


class TestUpdateProfile:
    async def test_updates_only_given_fields(self, authenticated_client: AsyncClient) -> None:
        await authenticated_client.post("/api/v1/users/sync")

        response = await authenticated_client.patch(
            "/api/v1/users/me",
            json={"profile_link": " https://linkedin.com/in/test ", "bio": "Angel investor"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["profile_link"] == "https://linkedin.com/in/test"
        assert data["bio"] == "Angel investor"
        assert data["name"] == "Test User"

        me = (await authenticated_client.get("/api/v1/users/me")).json()["data"]
        assert me["bio"] == "Angel investor"
