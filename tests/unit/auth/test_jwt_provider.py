"""Unit tests for JWTAuthProvider HS256 and ES256/JWKS paths."""

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from jose import jwt as jose_jwt

from infrastructure.auth import jwt_provider as jwt_provider_module
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

JWKS_URL = "https://auth.example.com/.well-known/jwks.json"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_hs256_token(payload: dict, secret: str = "test-secret") -> str:
    """Create an HS256-signed JWT with a given payload."""
    return jose_jwt.encode(payload, secret, algorithm="HS256")


def _jwks_provider(
    monkeypatch: pytest.MonkeyPatch,
    handler: Callable[[httpx.Request], httpx.Response],
) -> tuple[JWTAuthProvider, list[httpx.Request]]:
    """Provider whose JWKS requests go to ``handler`` through a mock transport."""
    requests: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    transport = httpx.MockTransport(recording)
    real_client = httpx.AsyncClient
    monkeypatch.setattr(
        jwt_provider_module.httpx,
        "AsyncClient",
        lambda *args, **kwargs: real_client(transport=transport),
    )
    provider = JWTAuthProvider(secret_key="unused", algorithm="HS256", jwks_url=JWKS_URL)
    return provider, requests


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def hs256_provider() -> JWTAuthProvider:
    """JWTAuthProvider configured for HS256 (local/test tokens)."""
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


# ---------------------------------------------------------------------------
# Tests: HS256 round trip and claims
# ---------------------------------------------------------------------------


class TestValidateTokenHs256:
    async def test_should_return_identity_for_created_token(
        self, hs256_provider: JWTAuthProvider
    ):
        token = hs256_provider.create_token(
            TokenUser(subject="did:privy:abc", email="jane@example.com", display_name="Jane")
        )

        result = await hs256_provider.validate_token(token)

        assert result == TokenUser(
            subject="did:privy:abc", email="jane@example.com", display_name="Jane"
        )

    async def test_should_accept_token_without_email(self, hs256_provider: JWTAuthProvider):
        """Identity providers may sign users in by wallet, without an email."""
        token = _make_hs256_token({"sub": "did:privy:wallet", "exp": 9999999999})

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.email is None

    async def test_should_read_name_from_user_metadata(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(
            {
                "sub": "did:privy:abc",
                "user_metadata": {"full_name": "Jane Doe"},
                "exp": 9999999999,
            }
        )

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.display_name == "Jane Doe"

    async def test_should_return_none_when_token_has_no_sub_claim(
        self, hs256_provider: JWTAuthProvider
    ):
        token = _make_hs256_token({"email": "user@example.com", "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_should_return_none_for_wrong_secret(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token({"sub": "did:privy:abc", "exp": 9999999999}, secret="other")

        assert await hs256_provider.validate_token(token) is None

    async def test_should_return_none_for_expired_token(self):
        expired = JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=-1)
        token = expired.create_token(TokenUser(subject="did:privy:abc"))

        fresh = JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)
        assert await fresh.validate_token(token) is None

    async def test_should_return_none_for_garbage(self, hs256_provider: JWTAuthProvider):
        assert await hs256_provider.validate_token("not-a-jwt") is None


# ---------------------------------------------------------------------------
# Tests: JWKS fetching
# ---------------------------------------------------------------------------


class TestFetchJwks:
    async def test_should_return_empty_dict_when_no_jwks_url(self):
        provider = JWTAuthProvider(secret_key="s", algorithm="HS256", jwks_url="")

        assert await provider._fetch_jwks() == {}

    async def test_should_fetch_and_cache_keys_by_kid(self, monkeypatch: pytest.MonkeyPatch):
        keys = {
            "keys": [
                {"kid": "key-1", "kty": "EC"},
                {"kty": "EC"},  # no kid
                {"kid": "key-2", "kty": "EC"},
            ]
        }
        provider, requests = _jwks_provider(
            monkeypatch, lambda request: httpx.Response(200, json=keys)
        )

        first = await provider._fetch_jwks()
        second = await provider._fetch_jwks()

        assert set(first) == {"key-1", "key-2"}
        assert second is first
        assert len(requests) == 1
        assert str(requests[0].url) == JWKS_URL

    async def test_should_return_empty_dict_on_http_error(self, monkeypatch: pytest.MonkeyPatch):
        provider, _ = _jwks_provider(monkeypatch, lambda request: httpx.Response(503))

        assert await provider._fetch_jwks() == {}
        assert provider._jwks_cache is None


# ---------------------------------------------------------------------------
# Tests: _validate_es256
# ---------------------------------------------------------------------------


class TestValidateEs256:
    async def test_should_return_none_when_header_has_no_kid(self):
        provider = JWTAuthProvider(secret_key="unused", algorithm="HS256")

        result = await provider._validate_es256("dummy.token.value", {"alg": "ES256"})

        assert result is None

    async def test_should_refetch_once_when_kid_is_unknown(self):
        provider = JWTAuthProvider(secret_key="unused", algorithm="HS256", jwks_url=JWKS_URL)

        with patch.object(provider, "_fetch_jwks", new_callable=AsyncMock) as mock_fetch:
            mock_fetch.return_value = {"other-kid": {"kty": "EC"}}

            result = await provider._validate_es256(
                "dummy.token.value", {"alg": "ES256", "kid": "missing-kid"}
            )

        assert result is None
        assert mock_fetch.await_count == 2

    async def test_should_decode_with_matching_key(self):
        provider = JWTAuthProvider(secret_key="unused", algorithm="HS256", jwks_url=JWKS_URL)
        key_data = {"kid": "test-kid", "kty": "EC", "crv": "P-256"}
        payload = {"sub": "did:privy:abc", "email": "jane@example.com"}

        with (
            patch.object(provider, "_fetch_jwks", new_callable=AsyncMock) as mock_fetch,
            patch.object(jwt_provider_module, "ECKey") as mock_eckey_cls,
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
        ):
            mock_fetch.return_value = {"test-kid": key_data}
            mock_ec_instance = MagicMock()
            mock_eckey_cls.return_value = mock_ec_instance
            mock_jwt.decode.return_value = payload

            result = await provider._validate_es256(
                "es256.token.value", {"alg": "ES256", "kid": "test-kid"}
            )

        assert result == payload
        mock_eckey_cls.assert_called_once_with(key_data, algorithm="ES256")
        mock_jwt.decode.assert_called_once_with(
            "es256.token.value",
            mock_ec_instance,
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    async def test_validate_token_delegates_es256_tokens(self):
        provider = JWTAuthProvider(secret_key="unused", algorithm="HS256")

        with patch.object(jwt_provider_module, "jwt") as mock_jwt:
            mock_jwt.get_unverified_header.return_value = {"alg": "ES256", "kid": "k1"}
            mock_jwt.JWTError = jose_jwt.JWTError

            with patch.object(provider, "_validate_es256", new_callable=AsyncMock) as mock_es256:
                mock_es256.return_value = {"sub": "did:privy:es", "name": "ES User"}

                result = await provider.validate_token("es256.token.here")

        assert result == TokenUser(subject="did:privy:es", email=None, display_name="ES User")
