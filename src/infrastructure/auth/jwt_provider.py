"""JWT authentication provider implementation.

Accepts tokens issued by the external identity provider (ES256, verified
against its JWKS endpoint) and locally-created tokens (HS256, for tests and
local development).

Expected payload:
    {
        "sub": "did:privy:abc123",
        "email": "user@example.com",
        "name": "Jane",
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta
from typing import Any, Optional

import httpx
import structlog
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        jwks_url: str = settings.identity_jwks_url,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._jwks_url = jwks_url
        self._jwks_cache: dict[str, Any] | None = None

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and extract the caller identity.

        The signing algorithm is read from the token header: ES256 tokens are
        checked against the JWKS public key, anything else against the
        shared secret.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg == "ES256":
                payload = await self._validate_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if payload is None:
            return None

        subject = payload.get("sub")
        if not subject:
            return None

        metadata = payload.get("user_metadata") or {}
        display_name = (
            payload.get("name")
            or metadata.get("display_name")
            or metadata.get("name")
            or metadata.get("full_name")
        )

        return TokenUser(
            subject=str(subject),
            email=payload.get("email"),
            display_name=display_name,
        )

    async def _fetch_jwks(self) -> dict[str, Any]:
        """Fetch the identity provider's signing keys, keyed by ``kid``."""
        if self._jwks_cache is not None:
            return self._jwks_cache
        if not self._jwks_url:
            return {}

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(self._jwks_url, timeout=10.0)
                response.raise_for_status()
                keys = response.json().get("keys", [])
        except (httpx.HTTPError, ValueError):
            logger.exception("jwks_fetch_failed", jwks_url=self._jwks_url)
            return {}

        self._jwks_cache = {k["kid"]: k for k in keys if k.get("kid")}
        logger.info("jwks_fetched", key_count=len(self._jwks_cache))
        return self._jwks_cache

    async def _validate_es256(self, token: str, header: dict) -> Optional[dict]:
        """Validate an ES256-signed JWT using JWKS public keys."""
        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await self._fetch_jwks()).get(kid)
        if not key_data:
            # Unknown kid: the provider may have rotated keys.
            self._jwks_cache = None
            key_data = (await self._fetch_jwks()).get(kid)
            if not key_data:
                logger.warning("jwks_key_not_found", kid=kid)
                return None

        ec_key = ECKey(key_data, algorithm="ES256")
        return jwt.decode(
            token,
            ec_key,
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create an HS256 token for a user (tests and local development).

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": user.subject,
            "exp": expire,
        }
        if user.email:
            payload["email"] = user.email
        if user.display_name:
            payload["name"] = user.display_name

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
