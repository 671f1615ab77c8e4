"""Fixtures for API integration tests: signed-in users, groups and members."""

from collections.abc import Awaitable, Callable
from typing import Any

import pytest
from httpx import AsyncClient

from tests.conftest import ActingUser

SignIn = Callable[..., Awaitable[dict[str, Any]]]

CURATOR = ("did:privy:curator", "cora@example.com", "Cora Curator")
INVESTOR = ("did:privy:investor", "ivan@example.com", "Ivan Investor")
OUTSIDER = ("did:privy:outsider", "olga@example.com", "Olga Outsider")


@pytest.fixture
def sign_in(authenticated_client: AsyncClient, acting: ActingUser) -> SignIn:
    """Act as a user, syncing their profile and optionally choosing a role."""

    async def _sign_in(
        subject: str, email: str | None, name: str | None, role: str | None = None
    ) -> dict[str, Any]:
        acting.act_as(subject, email=email, name=name)
        response = await authenticated_client.post("/api/v1/users/sync")
        assert response.status_code == 200
        if role:
            response = await authenticated_client.put(
                "/api/v1/users/me/role", json={"role": role}
            )
            assert response.status_code == 200
        return response.json()["data"]

    return _sign_in


@pytest.fixture
def as_curator(sign_in: SignIn) -> Callable[[], Awaitable[dict[str, Any]]]:
    async def _as() -> dict[str, Any]:
        return await sign_in(*CURATOR, role="curator")

    return _as


@pytest.fixture
def as_investor(sign_in: SignIn) -> Callable[[], Awaitable[dict[str, Any]]]:
    async def _as() -> dict[str, Any]:
        return await sign_in(*INVESTOR, role="investor")

    return _as


@pytest.fixture
def as_outsider(sign_in: SignIn) -> Callable[[], Awaitable[dict[str, Any]]]:
    async def _as() -> dict[str, Any]:
        return await sign_in(*OUTSIDER, role="investor")

    return _as


@pytest.fixture
async def group(
    authenticated_client: AsyncClient,
    as_curator: Callable[[], Awaitable[dict[str, Any]]],
) -> dict[str, Any]:
    """A private group curated by CURATOR."""
    await as_curator()
    response = await authenticated_client.post(
        "/api/v1/groups",
        json={"name": "Seed Syndicate", "description": "Early stage", "sector": "Fintech"},
    )
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
async def member_group(
    authenticated_client: AsyncClient,
    group: dict[str, Any],
    as_curator: Callable[[], Awaitable[dict[str, Any]]],
    as_investor: Callable[[], Awaitable[dict[str, Any]]],
) -> dict[str, Any]:
    """The group with INVESTOR admitted as a member. Leaves the curator acting."""
    await as_investor()
    response = await authenticated_client.post(
        f"/api/v1/groups/{group['id']}/applications",
        json={"interest_statement": "Fintech angel"},
    )
    application_id = response.json()["data"]["id"]

    await as_curator()
    response = await authenticated_client.post(f"/api/v1/applications/{application_id}/approve")
    assert response.status_code == 200
    return group


@pytest.fixture
async def deal(
    authenticated_client: AsyncClient, member_group: dict[str, Any]
) -> dict[str, Any]:
    """A deal in the member group, created by the curator."""
    response = await authenticated_client.post(
        f"/api/v1/groups/{member_group['id']}/deals",
        json={"name": "Acme Series A", "description": "Payments infrastructure"},
    )
    assert response.status_code == 201
    return response.json()["data"]
