"""User service layer: sign-in sync, onboarding and profile edits."""

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog

from core.exceptions import AuthenticationError, InvalidRoleError, ProfileNotFoundError
from domain.entities.user import PlatformRole, User
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class UserService:
    """Service layer for platform users."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def sync_user(
        self,
        external_ref: str,
        email: str | None = None,
        name: str | None = None,
    ) -> User:
        """Create the user on first sign-in, or refresh their email and name.

        Values missing from the identity token never overwrite stored ones.
        """
        if not external_ref:
            raise AuthenticationError("Missing identity subject")

        async with self._uow_factory() as uow:
            user = await uow.users.get_by_external_ref(external_ref)
            if user is None:
                user = await uow.users.create(
                    User(external_ref=external_ref, email=email, name=name)
                )
                logger.info("user_created", user_id=str(user.id))
            else:
                user.email = email or user.email
                user.name = name or user.name
                user.updated_at = datetime.utcnow()
                user = await uow.users.update(user)

            await uow.commit()
            return user

    async def set_role(self, external_ref: str, role: str) -> User:
        """Choose the platform role during onboarding."""
        try:
            platform_role = PlatformRole(role)
        except ValueError:
            raise InvalidRoleError(role)

        async with self._uow_factory() as uow:
            user = await uow.users.get_by_external_ref(external_ref)
            if not user:
                raise ProfileNotFoundError(external_ref)

            user.role = platform_role
            user.updated_at = datetime.utcnow()
            user = await uow.users.update(user)
            await uow.commit()

            logger.info("user_role_set", user_id=str(user.id), role=platform_role.value)
            return user

    async def get_profile(self, external_ref: str) -> User:
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_external_ref(external_ref)
            if not user:
                raise ProfileNotFoundError(external_ref)
            return user

    async def get_by_id(self, user_id: UUID) -> User:
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if not user:
                raise ProfileNotFoundError(str(user_id))
            return user

    async def update_profile(
        self,
        user_id: UUID,
        name: str | None = None,
        email: str | None = None,
        profile_link: str | None = None,
        bio: str | None = None,
    ) -> User:
        """Update the editable profile fields. ``None`` leaves a field as is."""
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if not user:
                raise ProfileNotFoundError(str(user_id))

            if name is not None:
                user.name = name.strip() or None
            if email is not None:
                user.email = email.strip() or None
            if profile_link is not None:
                user.profile_link = profile_link.strip() or None
            if bio is not None:
                user.bio = bio.strip() or None
            user.updated_at = datetime.utcnow()

            user = await uow.users.update(user)
            await uow.commit()
            return user
