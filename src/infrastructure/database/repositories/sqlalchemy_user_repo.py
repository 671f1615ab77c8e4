"""SQLAlchemy implementation of User repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.user import PlatformRole, User, UserSummary
from infrastructure.database.models import UserModel


def to_summary(model: UserModel | None) -> UserSummary | None:
    """Map a joined user row to the summary shown next to content."""
    if model is None:
        return None
    return UserSummary(id=model.id, name=model.name, email=model.email)


class SQLAlchemyUserRepository:
    """SQLAlchemy implementation of IUserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> User | None:
        """Get a user by ID."""
        model = await self._session.get(UserModel, id)
        return self._to_entity(model) if model else None

    async def get_by_external_ref(self, external_ref: str) -> User | None:
        """Get a user by identity provider subject."""
        stmt = select(UserModel).where(UserModel.external_ref == external_ref)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, user: User) -> User:
        """Create a new user."""
        model = self._to_model(user)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, user: User) -> User:
        """Update an existing user."""
        model = await self._session.get(UserModel, user.id)
        if not model:
            raise ValueError(f"User {user.id} not found")

        model.name = user.name
        model.email = user.email
        model.role = user.role.value if user.role else None
        model.profile_link = user.profile_link
        model.bio = user.bio
        model.updated_at = user.updated_at

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: UserModel) -> User:
        """Convert ORM model to domain entity."""
        return User(
            id=model.id,
            external_ref=model.external_ref,
            name=model.name,
            email=model.email,
            role=PlatformRole(model.role) if model.role else None,
            profile_link=model.profile_link,
            bio=model.bio,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: User) -> UserModel:
        """Convert domain entity to ORM model."""
        return UserModel(
            id=entity.id,
            external_ref=entity.external_ref,
            name=entity.name,
            email=entity.email,
            role=entity.role.value if entity.role else None,
            profile_link=entity.profile_link,
            bio=entity.bio,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
