"""SQLAlchemy implementation of Application repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.application import Application, ApplicationStatus, ApplicationView
from infrastructure.database.models import ApplicationModel, UserModel
from infrastructure.database.repositories.sqlalchemy_user_repo import to_summary


class SQLAlchemyApplicationRepository:
    """SQLAlchemy implementation of IApplicationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Application | None:
        """Get an application by ID."""
        model = await self._session.get(ApplicationModel, id)
        return self._to_entity(model) if model else None

    async def get_pending(self, user_id: UUID, group_id: UUID) -> Application | None:
        """Get the pending application for the pair, if any."""
        stmt = select(ApplicationModel).where(
            ApplicationModel.user_id == user_id,
            ApplicationModel.group_id == group_id,
            ApplicationModel.status == ApplicationStatus.PENDING.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_entity(model) if model else None

    async def get_latest(self, user_id: UUID, group_id: UUID) -> Application | None:
        """Get the most recently created application for the pair."""
        stmt = (
            select(ApplicationModel)
            .where(
                ApplicationModel.user_id == user_id,
                ApplicationModel.group_id == group_id,
            )
            .order_by(ApplicationModel.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_group(self, group_id: UUID) -> list[ApplicationView]:
        """Get a group's applications joined with the applicants, oldest first."""
        stmt = (
            select(ApplicationModel, UserModel)
            .outerjoin(UserModel, UserModel.id == ApplicationModel.user_id)
            .where(ApplicationModel.group_id == group_id)
            .order_by(ApplicationModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [
            ApplicationView(application=self._to_entity(a), user=to_summary(u))
            for a, u in result.all()
        ]

    async def count_pending(self, group_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(ApplicationModel)
            .where(
                ApplicationModel.group_id == group_id,
                ApplicationModel.status == ApplicationStatus.PENDING.value,
            )
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def create(self, application: Application) -> Application:
        """Create a new application."""
        model = self._to_model(application)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update_status(
        self, id: UUID, status: ApplicationStatus
    ) -> Application | None:
        """Set the status and touch updated_at."""
        model = await self._session.get(ApplicationModel, id)
        if not model:
            return None

        model.status = status.value
        model.updated_at = datetime.utcnow()
        await self._session.flush()
        return self._to_entity(model)

    async def delete_for_group(self, group_id: UUID) -> int:
        stmt = delete(ApplicationModel).where(ApplicationModel.group_id == group_id)
        result = await self._session.execute(stmt)
        return result.rowcount

    def _to_entity(self, model: ApplicationModel) -> Application:
        """Convert ORM model to domain entity."""
        return Application(
            id=model.id,
            user_id=model.user_id,
            group_id=model.group_id,
            status=ApplicationStatus(model.status),
            profile_link=model.profile_link,
            interest_statement=model.interest_statement,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Application) -> ApplicationModel:
        """Convert domain entity to ORM model."""
        return ApplicationModel(
            id=entity.id,
            user_id=entity.user_id,
            group_id=entity.group_id,
            status=entity.status.value,
            profile_link=entity.profile_link,
            interest_statement=entity.interest_statement,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
