"""Supabase Storage implementation of the object storage gateway."""

from typing import Optional
from urllib.parse import quote

import httpx
import structlog

from core.config import settings

logger = structlog.get_logger()


class SupabaseObjectStorage:
    """Stores deal documents in a Supabase Storage bucket over its REST API.

    Uses the service role key, so it must only run server-side. Failures
    are logged and reported as ``False`` / ``None``.
    """

    def __init__(
        self,
        base_url: str = settings.supabase_url,
        service_key: str = settings.supabase_service_role_key,
        bucket: str = settings.storage_bucket,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._bucket = bucket
        self._client = client or httpx.AsyncClient(timeout=30.0)
        self._headers = {
            "Authorization": f"Bearer {service_key}",
            "apikey": service_key,
        }

    def _object_url(self, *parts: str) -> str:
        return "/".join([f"{self._base_url}/storage/v1/object", *parts])

    async def upload(self, path: str, content: bytes, content_type: str) -> bool:
        """Upload without overwriting an existing object."""
        try:
            response = await self._client.post(
                self._object_url(self._bucket, quote(path)),
                content=content,
                headers={
                    **self._headers,
                    "Content-Type": content_type or "application/octet-stream",
                    "x-upsert": "false",
                },
            )
        except httpx.HTTPError as exc:
            logger.warning("storage_upload_failed", path=path, error=str(exc))
            return False

        if response.is_error:
            logger.warning(
                "storage_upload_rejected",
                path=path,
                status_code=response.status_code,
            )
            return False
        return True

    async def signed_url(self, path: str, expires_in: int) -> str | None:
        try:
            response = await self._client.post(
                self._object_url("sign", self._bucket, quote(path)),
                json={"expiresIn": expires_in},
                headers=self._headers,
            )
            response.raise_for_status()
            signed = response.json().get("signedURL")
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("storage_sign_failed", path=path, error=str(exc))
            return None

        if not signed:
            return None
        return f"{self._base_url}/storage/v1{signed}"

    async def remove(self, path: str) -> bool:
        try:
            response = await self._client.request(
                "DELETE",
                self._object_url(self._bucket),
                json={"prefixes": [path]},
                headers=self._headers,
            )
        except httpx.HTTPError as exc:
            logger.warning("storage_remove_failed", path=path, error=str(exc))
            return False

        if response.is_error:
            logger.warning(
                "storage_remove_rejected",
                path=path,
                status_code=response.status_code,
            )
            return False
        return True

    async def aclose(self) -> None:
        await self._client.aclose()
