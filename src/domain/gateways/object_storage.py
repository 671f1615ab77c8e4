"""Object storage protocol for deal documents."""

from typing import Protocol


class IObjectStorage(Protocol):
    """Protocol for a blob store with signed-URL retrieval."""

    async def upload(self, path: str, content: bytes, content_type: str) -> bool:
        """Store ``content`` under ``path``. Returns False if the store refused it."""
        ...

    async def signed_url(self, path: str, expires_in: int) -> str | None:
        """Create a time-limited retrieval URL, or None on failure."""
        ...

    async def remove(self, path: str) -> bool:
        """Delete the object at ``path``."""
        ...
