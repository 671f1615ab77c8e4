"""Resend email sender."""

from typing import Optional

import httpx
import structlog

from core.config import settings
from domain.gateways.email_sender import SendEmailResult

logger = structlog.get_logger()


class ResendEmailSender:
    """Delivers email through the Resend REST API.

    Never raises: transport errors and non-2xx responses are reported in the
    returned ``SendEmailResult``.
    """

    def __init__(
        self,
        api_key: str = settings.resend_api_key,
        api_url: str = settings.resend_api_url,
        sender: str = settings.email_from,
        timeout: float = settings.email_timeout_seconds,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._sender = sender
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send(self, recipient: str, subject: str, body: str) -> SendEmailResult:
        if not self._api_key:
            logger.warning("email_not_configured", subject=subject)
            return SendEmailResult(success=False, error="Email not configured")

        try:
            response = await self._client.post(
                self._api_url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                json={
                    "from": self._sender,
                    "to": [recipient],
                    "subject": subject,
                    "html": body,
                },
            )
        except httpx.HTTPError as exc:
            logger.warning("email_send_failed", error=str(exc))
            return SendEmailResult(success=False, error=str(exc))

        if response.is_error:
            logger.warning(
                "email_send_rejected",
                status_code=response.status_code,
                body=response.text[:500],
            )
            return SendEmailResult(
                success=False,
                error=f"Resend returned {response.status_code}",
            )

        try:
            email_id = response.json().get("id")
        except ValueError:
            email_id = None
        return SendEmailResult(success=True, id=email_id)

    async def aclose(self) -> None:
        await self._client.aclose()
