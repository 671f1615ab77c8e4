"""Membership workflow: applications to join a group."""

from collections.abc import Callable
from typing import Optional
from uuid import UUID

import structlog

from core.exceptions import StorageError
from domain.entities.application import Application, ApplicationStatus, ApplicationView
from domain.entities.group import Membership, MembershipRole
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.notification_service import NotificationService

logger = structlog.get_logger()


class ApplicationService:
    """Service layer for submitting and reviewing group applications.

    Operations return ``None`` / ``[]`` / ``0`` for missing input, missing
    rows and storage failures alike; they never raise. Emails are handed to
    the notification service after the transaction commits.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notification_service: Optional["NotificationService"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._notification = notification_service

    async def submit_application(
        self,
        group_id: UUID | None,
        user_id: UUID | None,
        profile_link: str | None = None,
        interest_statement: str | None = None,
    ) -> Application | None:
        """Submit an application, or return the pending one for the pair."""
        if not group_id or not user_id:
            return None

        try:
            async with self._uow_factory() as uow:
                existing = await uow.applications.get_pending(user_id, group_id)
                if existing:
                    logger.info(
                        "submit_application_already_pending",
                        application_id=str(existing.id),
                    )
                    return existing

                application = await uow.applications.create(
                    Application(
                        user_id=user_id,
                        group_id=group_id,
                        profile_link=profile_link,
                        interest_statement=interest_statement,
                    )
                )
                await uow.commit()
        except StorageError:
            # A concurrent submission may have won the pending-per-pair index.
            winner = await self._find_pending(user_id, group_id)
            if winner is None:
                logger.exception(
                    "submit_application_failed",
                    user_id=str(user_id),
                    group_id=str(group_id),
                )
            return winner

        logger.info(
            "application_submitted",
            application_id=str(application.id),
            group_id=str(group_id),
        )
        if self._notification:
            self._notification.notify_application_submitted(application)
        return application

    async def _find_pending(self, user_id: UUID, group_id: UUID) -> Application | None:
        try:
            async with self._uow_factory() as uow:
                return await uow.applications.get_pending(user_id, group_id)
        except StorageError:
            return None

    async def approve_application(self, application_id: UUID | None) -> Application | None:
        """Approve a pending application and create the member's membership.

        The status change and the membership insert commit together.
        Approving an approved application returns it unchanged.
        """
        if not application_id:
            return None

        try:
            async with self._uow_factory() as uow:
                application = await uow.applications.get(application_id)
                if application is None:
                    logger.warning(
                        "approve_application_not_found",
                        application_id=str(application_id),
                    )
                    return None
                if application.status == ApplicationStatus.APPROVED:
                    return application
                if application.status == ApplicationStatus.REJECTED:
                    logger.warning(
                        "approve_application_already_rejected",
                        application_id=str(application_id),
                    )
                    return None

                updated = await uow.applications.update_status(
                    application_id, ApplicationStatus.APPROVED
                )
                if updated is None:
                    return None

                membership = await uow.groups.get_membership(
                    updated.user_id, updated.group_id
                )
                if membership is None:
                    await uow.groups.add_membership(
                        Membership(
                            user_id=updated.user_id,
                            group_id=updated.group_id,
                            role=MembershipRole.MEMBER,
                        )
                    )

                await uow.commit()
        except StorageError:
            logger.exception(
                "approve_application_failed", application_id=str(application_id)
            )
            return None

        logger.info(
            "application_approved",
            application_id=str(application_id),
            group_id=str(updated.group_id),
        )
        if self._notification:
            self._notification.notify_application_approved(updated)
        return updated

    async def reject_application(self, application_id: UUID | None) -> Application | None:
        """Reject a pending application. No membership is created."""
        if not application_id:
            return None

        try:
            async with self._uow_factory() as uow:
                application = await uow.applications.get(application_id)
                if application is None:
                    logger.warning(
                        "reject_application_not_found",
                        application_id=str(application_id),
                    )
                    return None
                if application.status == ApplicationStatus.REJECTED:
                    return application
                if application.status == ApplicationStatus.APPROVED:
                    logger.warning(
                        "reject_application_already_approved",
                        application_id=str(application_id),
                    )
                    return None

                updated = await uow.applications.update_status(
                    application_id, ApplicationStatus.REJECTED
                )
                if updated is None:
                    return None
                await uow.commit()
        except StorageError:
            logger.exception(
                "reject_application_failed", application_id=str(application_id)
            )
            return None

        logger.info("application_rejected", application_id=str(application_id))
        if self._notification:
            self._notification.notify_application_rejected(updated)
        return updated

    async def get_application(self, application_id: UUID | None) -> Application | None:
        if not application_id:
            return None

        try:
            async with self._uow_factory() as uow:
                return await uow.applications.get(application_id)
        except StorageError:
            logger.exception("get_application_failed", application_id=str(application_id))
            return None

    async def get_applications(self, group_id: UUID | None) -> list[ApplicationView]:
        """List a group's applications with their applicants."""
        if not group_id:
            return []

        try:
            async with self._uow_factory() as uow:
                return await uow.applications.get_for_group(group_id)
        except StorageError:
            logger.exception("get_applications_failed", group_id=str(group_id))
            return []

    async def get_pending_application_count(self, group_id: UUID | None) -> int:
        if not group_id:
            return 0

        try:
            async with self._uow_factory() as uow:
                return await uow.applications.count_pending(group_id)
        except StorageError:
            logger.exception("get_pending_application_count_failed", group_id=str(group_id))
            return 0

    async def get_user_application(
        self, user_id: UUID | None, group_id: UUID | None
    ) -> Application | None:
        """Get the most recent application of a user to a group."""
        if not user_id or not group_id:
            return None

        try:
            async with self._uow_factory() as uow:
                return await uow.applications.get_latest(user_id, group_id)
        except StorageError:
            logger.exception(
                "get_user_application_failed",
                user_id=str(user_id),
                group_id=str(group_id),
            )
            return None
