"""Integration tests for deal endpoints."""

from collections.abc import Awaitable, Callable
from typing import Any

from httpx import AsyncClient

from tests.unit.conftest import FakeObjectStorage

Actor = Callable[[], Awaitable[dict[str, Any]]]


class TestDeals:
    async def test_created_deal_has_no_documents(
        self, authenticated_client: AsyncClient, deal: dict[str, Any]
    ) -> None:
        assert deal["name"] == "Acme Series A"
        assert deal["documents"] == []

    async def test_members_list_and_read_deals(
        self,
        authenticated_client: AsyncClient,
        deal: dict[str, Any],
        as_investor: Actor,
    ) -> None:
        await as_investor()

        listing = await authenticated_client.get(f"/api/v1/groups/{deal['group_id']}/deals")
        detail = await authenticated_client.get(f"/api/v1/deals/{deal['id']}")

        assert listing.json()["meta"]["total"] == 1
        assert detail.status_code == 200
        assert detail.json()["data"]["documents"] == []

    async def test_outsiders_cannot_read_deals(
        self,
        authenticated_client: AsyncClient,
        deal: dict[str, Any],
        as_outsider: Actor,
    ) -> None:
        await as_outsider()

        listing = await authenticated_client.get(f"/api/v1/groups/{deal['group_id']}/deals")
        detail = await authenticated_client.get(f"/api/v1/deals/{deal['id']}")

        assert listing.status_code == 403
        assert detail.status_code == 403

    async def test_members_cannot_create_deals(
        self,
        authenticated_client: AsyncClient,
        member_group: dict[str, Any],
        as_investor: Actor,
    ) -> None:
        await as_investor()

        response = await authenticated_client.post(
            f"/api/v1/groups/{member_group['id']}/deals", json={"name": "Side deal"}
        )

        assert response.status_code == 403

    async def test_curator_updates_deal(
        self, authenticated_client: AsyncClient, deal: dict[str, Any]
    ) -> None:
        response = await authenticated_client.patch(
            f"/api/v1/deals/{deal['id']}", json={"description": "  "}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Acme Series A"
        assert data["description"] is None

    async def test_delete_removes_comments_and_stored_files(
        self,
        authenticated_client: AsyncClient,
        deal: dict[str, Any],
        object_storage: FakeObjectStorage,
    ) -> None:
        await authenticated_client.post(
            f"/api/v1/deals/{deal['id']}/comments", json={"content": "Looks good"}
        )
        upload = await authenticated_client.post(
            f"/api/v1/deals/{deal['id']}/documents",
            files={"file": ("deck.pdf", b"%PDF-1.7", "application/pdf")},
        )
        path = upload.json()["data"]["storage_path"]

        response = await authenticated_client.delete(f"/api/v1/deals/{deal['id']}")

        assert response.status_code == 204
        assert object_storage.removed == [path]
        missing = await authenticated_client.get(f"/api/v1/deals/{deal['id']}")
        assert missing.status_code == 404
        assert missing.json()["error_code"] == "DEAL_NOT_FOUND"
