"""Service factories shared by the auth dependencies and the v1 routes."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.application_service import ApplicationService
from domain.services.comment_service import CommentService
from domain.services.deal_service import DealService
from domain.services.document_service import DocumentService
from domain.services.group_service import GroupService
from domain.services.identity_service import IdentityService
from domain.services.membership_service import MembershipService
from domain.services.notification_service import NotificationService
from domain.services.user_service import UserService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.email.resend_sender import ResendEmailSender
from infrastructure.storage.supabase_storage import SupabaseObjectStorage


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_email_sender() -> ResendEmailSender:
    """Get the shared Resend client."""
    return ResendEmailSender()


@lru_cache
def get_object_storage() -> SupabaseObjectStorage:
    """Get the shared Supabase Storage client."""
    return SupabaseObjectStorage()


@lru_cache
def get_notification_service() -> NotificationService:
    """Get Notification service instance."""
    return NotificationService(
        get_uow_factory(),
        sender=get_email_sender(),
        app_url=settings.app_url,
    )


@lru_cache
def get_identity_service() -> IdentityService:
    """Get Identity service instance."""
    return IdentityService(get_uow_factory())


@lru_cache
def get_user_service() -> UserService:
    """Get User service instance."""
    return UserService(get_uow_factory())


@lru_cache
def get_group_service() -> GroupService:
    """Get Group service instance."""
    return GroupService(get_uow_factory())


@lru_cache
def get_membership_service() -> MembershipService:
    """Get Membership service instance."""
    return MembershipService(get_uow_factory())


@lru_cache
def get_application_service() -> ApplicationService:
    """Get Application service instance."""
    return ApplicationService(
        get_uow_factory(),
        notification_service=get_notification_service(),
    )


@lru_cache
def get_comment_service() -> CommentService:
    """Get Comment service instance."""
    return CommentService(
        get_uow_factory(),
        notification_service=get_notification_service(),
    )


@lru_cache
def get_deal_service() -> DealService:
    """Get Deal service instance."""
    return DealService(get_uow_factory(), storage=get_object_storage())


@lru_cache
def get_document_service() -> DocumentService:
    """Get Document service instance."""
    return DocumentService(
        get_uow_factory(),
        storage=get_object_storage(),
        url_expiry_seconds=settings.signed_url_expiry_seconds,
    )
