"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient, Response
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.notification_service import NotificationService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from tests.unit.conftest import FakeObjectStorage, RecordingEmailSender

# Test database URL (SQLite in memory, one shared connection per engine)
TEST_DATABASE_URL = "sqlite+aiosqlite://"

TEST_APP_URL = "https://arca.test"


class ActingUser:
    """Identity returned by the overridden auth dependency.

    Tests switch ``user`` to act as a different caller between requests.
    """

    def __init__(self, user: TokenUser) -> None:
        self.user = user

    def act_as(self, subject: str, email: str | None = None, name: str | None = None) -> TokenUser:
        self.user = TokenUser(subject=subject, email=email, display_name=name)
        return self.user


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with every table created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def test_user() -> TokenUser:
    """Identity of the default caller."""
    return TokenUser(
        subject="did:privy:test-user",
        email="test@example.com",
        display_name="Test User",
    )


@pytest.fixture
def acting(test_user: TokenUser) -> ActingUser:
    return ActingUser(test_user)


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def mail() -> RecordingEmailSender:
    """Outbox of every email the app sends during a test."""
    return RecordingEmailSender()


@pytest.fixture
def object_storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def notifications(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork], mail: RecordingEmailSender
) -> NotificationService:
    return NotificationService(uow_factory, sender=mail, app_url=TEST_APP_URL)


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    from api.routes.health import get_session_factory
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    acting: ActingUser,
    auth_provider: JWTAuthProvider,
    notifications: NotificationService,
    object_storage: FakeObjectStorage,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated test client with database, auth and gateway overrides.

    This client:
    - Uses an in-memory SQLite database
    - Authenticates every request as ``acting.user``
    - Records outgoing email in ``mail`` and keeps uploads in ``object_storage``

    Scheduled notifications are drained after every response so they never
    share the single test connection with the next request.
    """
    from api.dependencies.auth import get_auth_provider, get_current_user
    from api.dependencies import services as deps
    from domain.services.application_service import ApplicationService
    from domain.services.comment_service import CommentService
    from domain.services.deal_service import DealService
    from domain.services.document_service import DocumentService
    from domain.services.group_service import GroupService
    from domain.services.identity_service import IdentityService
    from domain.services.membership_service import MembershipService
    from domain.services.user_service import UserService
    from main import create_app

    app = create_app()

    async def override_get_user() -> TokenUser:
        return acting.user

    overrides = {
        get_current_user: override_get_user,
        get_auth_provider: lambda: auth_provider,
        deps.get_notification_service: lambda: notifications,
        deps.get_identity_service: lambda: IdentityService(uow_factory),
        deps.get_user_service: lambda: UserService(uow_factory),
        deps.get_group_service: lambda: GroupService(uow_factory),
        deps.get_membership_service: lambda: MembershipService(uow_factory),
        deps.get_application_service: lambda: ApplicationService(
            uow_factory, notification_service=notifications
        ),
        deps.get_comment_service: lambda: CommentService(
            uow_factory, notification_service=notifications
        ),
        deps.get_deal_service: lambda: DealService(uow_factory, storage=object_storage),
        deps.get_document_service: lambda: DocumentService(
            uow_factory, storage=object_storage, url_expiry_seconds=3600
        ),
    }
    app.dependency_overrides.update(overrides)

    async def drain(response: Response) -> None:
        await notifications.drain()

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        event_hooks={"response": [drain]},
    ) as c:
        yield c

    app.dependency_overrides.clear()
