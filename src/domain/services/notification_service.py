"""Best-effort email notifications for the membership and comment workflows."""

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any
from uuid import UUID

import structlog

from domain.entities.application import Application
from domain.entities.comment import Comment, preview
from domain.gateways.email_sender import IEmailSender
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.email_templates import (
    APPLICATION_APPROVED,
    APPLICATION_REJECTED,
    APPLICATION_SUBMITTED,
    COMMENT_REPLY,
    NEW_COMMENT,
    EmailTemplate,
)

logger = structlog.get_logger()


class NotificationService:
    """Schedules workflow emails without blocking the caller.

    Every ``notify_*`` method returns immediately after scheduling a task.
    Lookups and delivery run inside that task and any failure is logged
    there, so the originating operation never observes it.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        sender: IEmailSender,
        app_url: str,
    ) -> None:
        self._uow_factory = uow_factory
        self._sender = sender
        self._app_url = app_url.rstrip("/")
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of scheduled deliveries that have not finished."""
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every scheduled delivery to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # --- Scheduling ---

    def _spawn(self, name: str, job: Coroutine[Any, Any, None]) -> None:
        try:
            task = asyncio.get_running_loop().create_task(self._guard(name, job))
        except RuntimeError:
            job.close()
            logger.warning("notification_no_event_loop", notification=name)
            return
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _guard(self, name: str, job: Coroutine[Any, Any, None]) -> None:
        try:
            await job
        except Exception:
            logger.exception("notification_failed", notification=name)

    async def _deliver(
        self,
        name: str,
        recipient: str | None,
        template: EmailTemplate,
        **values: Any,
    ) -> None:
        if not recipient:
            logger.info("notification_skipped_no_email", notification=name)
            return

        subject, body = template.render(**values)
        result = await self._sender.send(recipient, subject, body)
        if result.success:
            logger.info("notification_sent", notification=name, email_id=result.id)
        else:
            logger.warning("notification_not_sent", notification=name, error=result.error)

    # --- Membership workflow ---

    def notify_application_submitted(self, application: Application) -> None:
        """Tell the group's curator about a new application."""
        self._spawn("application_submitted", self._application_submitted(application))

    def notify_application_approved(self, application: Application) -> None:
        """Welcome the applicant to the group."""
        self._spawn("application_approved", self._application_decided(application, True))

    def notify_application_rejected(self, application: Application) -> None:
        """Tell the applicant their application was declined."""
        self._spawn("application_rejected", self._application_decided(application, False))

    async def _application_submitted(self, application: Application) -> None:
        async with self._uow_factory() as uow:
            group = await uow.groups.get(application.group_id)
            if group is None:
                return
            curator = await uow.users.get(group.curator_id)
            applicant = await uow.users.get(application.user_id)

        if curator is None:
            return

        await self._deliver(
            "application_submitted",
            curator.email,
            APPLICATION_SUBMITTED,
            curator_name=curator.name or "Curator",
            group_name=group.name,
            applicant_name=(applicant.name if applicant else None) or "Unknown",
            applicant_email=(applicant.email if applicant else None) or "No email provided",
            profile_link=application.profile_link or "Not provided",
            interest_statement=application.interest_statement or "Not provided",
            review_url=f"{self._app_url}/groups/{group.id}?tab=applications",
        )

    async def _application_decided(self, application: Application, approved: bool) -> None:
        async with self._uow_factory() as uow:
            group = await uow.groups.get(application.group_id)
            applicant = await uow.users.get(application.user_id)

        if group is None or applicant is None:
            return

        if approved:
            await self._deliver(
                "application_approved",
                applicant.email,
                APPLICATION_APPROVED,
                applicant_name=applicant.name or "Member",
                group_name=group.name,
                group_url=f"{self._app_url}/groups/{group.id}",
            )
        else:
            await self._deliver(
                "application_rejected",
                applicant.email,
                APPLICATION_REJECTED,
                applicant_name=applicant.name or "Applicant",
                group_name=group.name,
            )

    # --- Comment workflow ---

    def notify_comment_created(self, comment: Comment) -> None:
        """Notify the parent author (for replies) and the deal's creator.

        The two emails are scheduled separately so one failing does not
        suppress the other.
        """
        if comment.parent_id is not None:
            self._spawn("comment_reply", self._comment_reply(comment))
        self._spawn("new_comment", self._new_comment(comment))

    def _comment_url(self, group_id: UUID, deal_id: UUID, comment_id: UUID) -> str:
        return f"{self._app_url}/groups/{group_id}/deals/{deal_id}#comment-{comment_id}"

    async def _comment_reply(self, comment: Comment) -> None:
        async with self._uow_factory() as uow:
            parent = await uow.comments.get(comment.parent_id)
            if parent is None or parent.user_id == comment.user_id:
                return
            recipient = await uow.users.get(parent.user_id)
            replier = await uow.users.get(comment.user_id)
            deal = await uow.deals.get(comment.deal_id)

        if recipient is None or deal is None:
            return

        await self._deliver(
            "comment_reply",
            recipient.email,
            COMMENT_REPLY,
            recipient_name=recipient.name or "User",
            replier_name=(replier.name if replier else None) or "Someone",
            deal_name=deal.name,
            reply_preview=preview(comment.content),
            view_url=self._comment_url(deal.group_id, deal.id, comment.id),
        )

    async def _new_comment(self, comment: Comment) -> None:
        async with self._uow_factory() as uow:
            deal = await uow.deals.get(comment.deal_id)
            if deal is None or deal.created_by == comment.user_id:
                return
            creator = await uow.users.get(deal.created_by)
            commenter = await uow.users.get(comment.user_id)

        if creator is None:
            return

        await self._deliver(
            "new_comment",
            creator.email,
            NEW_COMMENT,
            curator_name=creator.name or "Curator",
            commenter_name=(commenter.name if commenter else None) or "Someone",
            deal_name=deal.name,
            comment_preview=preview(comment.content),
            view_url=self._comment_url(deal.group_id, deal.id, comment.id),
        )
