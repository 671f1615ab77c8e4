"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.application_repository import IApplicationRepository
from domain.repositories.comment_repository import ICommentRepository
from domain.repositories.deal_repository import IDealRepository
from domain.repositories.group_repository import IGroupRepository
from domain.repositories.user_repository import IUserRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions.

    Leaving the context with an exception rolls back; storage errors leave
    it as ``core.exceptions.StorageError``.
    """

    users: IUserRepository
    groups: IGroupRepository
    applications: IApplicationRepository
    deals: IDealRepository
    comments: ICommentRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
