"""Email delivery protocol."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class SendEmailResult:
    """Outcome of a delivery attempt."""

    success: bool
    id: str | None = None
    error: str | None = None


class IEmailSender(Protocol):
    """Protocol for outbound email providers.

    Implementations report failures through ``SendEmailResult`` and must not
    raise.
    """

    async def send(self, recipient: str, subject: str, body: str) -> SendEmailResult:
        """
        Attempt to deliver one email.

        Args:
            recipient: Destination address
            subject: Subject line
            body: Rendered HTML body

        Returns:
            SendEmailResult describing the attempt
        """
        ...
