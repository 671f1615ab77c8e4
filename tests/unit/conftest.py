"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.gateways.email_sender import SendEmailResult


class FakeUnitOfWork:
    """Fake Unit of Work with all 5 repository mocks for unit testing."""

    def __init__(self) -> None:
        self.users = AsyncMock()
        self.groups = AsyncMock()
        self.applications = AsyncMock()
        self.deals = AsyncMock()
        self.comments = AsyncMock()
        self.committed = False
        self.rolled_back = False
        self.entered = 0

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        self.entered += 1
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class RecordingEmailSender:
    """Email sender that keeps every message instead of delivering it."""

    def __init__(self, result: SendEmailResult | None = None) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.result = result or SendEmailResult(success=True, id="email-1")

    async def send(self, recipient: str, subject: str, body: str) -> SendEmailResult:
        self.sent.append((recipient, subject, body))
        return self.result


class FakeObjectStorage:
    """In-memory object storage."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.upload_ok = True
        self.remove_ok = True
        self.sign_ok = True
        self.removed: list[str] = []

    async def upload(self, path: str, content: bytes, content_type: str) -> bool:
        if self.upload_ok:
            self.objects[path] = content
        return self.upload_ok

    async def signed_url(self, path: str, expires_in: int) -> str | None:
        if not self.sign_ok:
            return None
        return f"https://storage.test/{path}?expires={expires_in}"

    async def remove(self, path: str) -> bool:
        self.removed.append(path)
        self.objects.pop(path, None)
        return self.remove_ok


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def group_id() -> UUID:
    """A random group ID."""
    return uuid4()


@pytest.fixture
def deal_id() -> UUID:
    """A random deal ID."""
    return uuid4()


@pytest.fixture
def curator_id() -> UUID:
    """A random curator ID (distinct from user_id)."""
    return uuid4()
