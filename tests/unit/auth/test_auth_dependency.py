"""Unit tests for authentication dependencies."""

from unittest.mock import AsyncMock

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from api.dependencies.auth import get_current_profile, get_current_user
from core.exceptions import AuthenticationError, ErrorCode, ProfileNotFoundError
from domain.entities.user import User
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser


@pytest.fixture
def mock_auth_provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


@pytest.fixture
def test_token_user() -> TokenUser:
    return TokenUser(subject="did:privy:abc123", email="test@example.com", display_name="Test User")


# --- get_current_user ---


class TestGetCurrentUser:
    async def test_returns_user_with_valid_token(
        self, mock_auth_provider: JWTAuthProvider, test_token_user: TokenUser
    ):
        token = mock_auth_provider.create_token(test_token_user)
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        result = await get_current_user(credentials, mock_auth_provider)

        assert result.subject == test_token_user.subject
        assert result.email == test_token_user.email

    async def test_raises_when_no_credentials(self, mock_auth_provider: JWTAuthProvider):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(None, mock_auth_provider)

        assert exc_info.value.error_code == ErrorCode.UNAUTHORIZED

    async def test_raises_when_invalid_token(self, mock_auth_provider: JWTAuthProvider):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="invalid.jwt.token")

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(credentials, mock_auth_provider)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN


# --- get_current_profile ---


class TestGetCurrentProfile:
    async def test_loads_profile_by_subject(self, test_token_user: TokenUser):
        profile = User(external_ref=test_token_user.subject)
        service = AsyncMock()
        service.get_profile.return_value = profile

        result = await get_current_profile(test_token_user, service)

        assert result is profile
        service.get_profile.assert_awaited_once_with("did:privy:abc123")

    async def test_unsynced_user_raises(self, test_token_user: TokenUser):
        service = AsyncMock()
        service.get_profile.side_effect = ProfileNotFoundError(test_token_user.subject)

        with pytest.raises(ProfileNotFoundError):
            await get_current_profile(test_token_user, service)
