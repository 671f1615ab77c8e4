"""Unit tests for NotificationService."""

from uuid import UUID, uuid4

import pytest

from domain.entities.application import Application
from domain.entities.comment import Comment
from domain.entities.deal import Deal
from domain.entities.group import Group
from domain.entities.user import User
from domain.gateways.email_sender import SendEmailResult
from domain.services.notification_service import NotificationService
from tests.unit.conftest import FakeUnitOfWork, RecordingEmailSender

APP_URL = "https://arca.test"


@pytest.fixture
def curator() -> User:
    return User(external_ref="did:curator", email="curator@example.com", name="Cora")


@pytest.fixture
def applicant() -> User:
    return User(external_ref="did:applicant", email="jane@example.com", name="Jane")


@pytest.fixture
def group(curator: User) -> Group:
    return Group(name="Seed <Syndicate>", curator_id=curator.id)


@pytest.fixture
def deal(group: Group, curator: User) -> Deal:
    return Deal(name="Acme Seed", group_id=group.id, created_by=curator.id)


@pytest.fixture
def service(uow: FakeUnitOfWork, email_sender: RecordingEmailSender) -> NotificationService:
    return NotificationService(lambda: uow, email_sender, app_url=APP_URL + "/")


def _users(uow: FakeUnitOfWork, *users: User) -> None:
    by_id = {u.id: u for u in users}

    async def get(user_id: UUID) -> User | None:
        return by_id.get(user_id)

    uow.users.get.side_effect = get


# --- application emails ---


class TestApplicationEmails:
    async def test_submitted_goes_to_curator(
        self,
        service: NotificationService,
        uow: FakeUnitOfWork,
        email_sender: RecordingEmailSender,
        group: Group,
        curator: User,
        applicant: User,
    ):
        uow.groups.get.return_value = group
        _users(uow, curator, applicant)
        application = Application(
            user_id=applicant.id, group_id=group.id, interest_statement="Fintech"
        )

        service.notify_application_submitted(application)
        await service.drain()

        assert len(email_sender.sent) == 1
        recipient, subject, body = email_sender.sent[0]
        assert recipient == "curator@example.com"
        assert subject == "New application for Seed <Syndicate>"
        assert "Seed &lt;Syndicate&gt;" in body
        assert "Jane" in body
        assert "Not provided" in body
        assert f"{APP_URL}/groups/{group.id}?tab=applications" in body

    async def test_submitted_uses_defaults_for_unknown_applicant(
        self,
        service: NotificationService,
        uow: FakeUnitOfWork,
        email_sender: RecordingEmailSender,
        group: Group,
        curator: User,
    ):
        uow.groups.get.return_value = group
        _users(uow, curator)

        service.notify_application_submitted(Application(user_id=uuid4(), group_id=group.id))
        await service.drain()

        body = email_sender.sent[0][2]
        assert "Unknown" in body
        assert "No email provided" in body

    async def test_approved_goes_to_applicant(
        self,
        service: NotificationService,
        uow: FakeUnitOfWork,
        email_sender: RecordingEmailSender,
        group: Group,
        applicant: User,
    ):
        uow.groups.get.return_value = group
        _users(uow, applicant)

        service.notify_application_approved(
            Application(user_id=applicant.id, group_id=group.id)
        )
        await service.drain()

        recipient, subject, body = email_sender.sent[0]
        assert recipient == "jane@example.com"
        assert subject.startswith("Welcome to")
        assert f"{APP_URL}/groups/{group.id}" in body

    async def test_rejected_goes_to_applicant(
        self,
        service: NotificationService,
        uow: FakeUnitOfWork,
        email_sender: RecordingEmailSender,
        group: Group,
        applicant: User,
    ):
        uow.groups.get.return_value = group
        _users(uow, applicant)

        service.notify_application_rejected(
            Application(user_id=applicant.id, group_id=group.id)
        )
        await service.drain()

        assert email_sender.sent[0][1].startswith("Application update for")

    async def test_recipient_without_email_is_skipped(
        self,
        service: NotificationService,
        uow: FakeUnitOfWork,
        email_sender: RecordingEmailSender,
        group: Group,
    ):
        silent = User(external_ref="did:silent")
        uow.groups.get.return_value = group
        _users(uow, silent)

        service.notify_application_approved(Application(user_id=silent.id, group_id=group.id))
        await service.drain()

        assert email_sender.sent == []


# --- comment emails ---


class TestCommentEmails:
    async def test_reply_notifies_parent_author_and_deal_creator(
        self,
        service: NotificationService,
        uow: FakeUnitOfWork,
        email_sender: RecordingEmailSender,
        deal: Deal,
        curator: User,
        applicant: User,
    ):
        replier = User(external_ref="did:replier", email="rex@example.com", name="Rex")
        parent = Comment(content="Question", user_id=applicant.id, deal_id=deal.id)
        reply = Comment(
            content="x" * 250, user_id=replier.id, deal_id=deal.id, parent_id=parent.id
        )
        uow.comments.get.return_value = parent
        uow.deals.get.return_value = deal
        _users(uow, curator, applicant, replier)

        service.notify_comment_created(reply)
        await service.drain()

        recipients = sorted(r for r, _, _ in email_sender.sent)
        assert recipients == ["curator@example.com", "jane@example.com"]
        reply_body = next(b for r, _, b in email_sender.sent if r == "jane@example.com")
        assert "x" * 200 + "..." in reply_body
        assert f"#comment-{reply.id}" in reply_body

    async def test_creator_commenting_on_own_deal_gets_no_email(
        self,
        service: NotificationService,
        uow: FakeUnitOfWork,
        email_sender: RecordingEmailSender,
        deal: Deal,
        curator: User,
    ):
        uow.deals.get.return_value = deal
        _users(uow, curator)

        service.notify_comment_created(
            Comment(content="Update", user_id=curator.id, deal_id=deal.id)
        )
        await service.drain()

        assert email_sender.sent == []

    async def test_self_reply_skips_reply_email(
        self,
        service: NotificationService,
        uow: FakeUnitOfWork,
        email_sender: RecordingEmailSender,
        deal: Deal,
        curator: User,
        applicant: User,
    ):
        parent = Comment(content="Question", user_id=applicant.id, deal_id=deal.id)
        reply = Comment(
            content="Follow-up", user_id=applicant.id, deal_id=deal.id, parent_id=parent.id
        )
        uow.comments.get.return_value = parent
        uow.deals.get.return_value = deal
        _users(uow, curator, applicant)

        service.notify_comment_created(reply)
        await service.drain()

        assert [r for r, _, _ in email_sender.sent] == ["curator@example.com"]


# --- failure isolation ---


class TestFailureIsolation:
    async def test_lookup_failure_is_swallowed(
        self,
        service: NotificationService,
        uow: FakeUnitOfWork,
        email_sender: RecordingEmailSender,
    ):
        uow.groups.get.side_effect = RuntimeError("database down")

        service.notify_application_submitted(Application(user_id=uuid4(), group_id=uuid4()))
        await service.drain()

        assert email_sender.sent == []
        assert service.pending == 0

    async def test_failed_delivery_does_not_raise(
        self,
        uow: FakeUnitOfWork,
        group: Group,
        applicant: User,
    ):
        sender = RecordingEmailSender(SendEmailResult(success=False, error="quota exceeded"))
        service = NotificationService(lambda: uow, sender, app_url=APP_URL)
        uow.groups.get.return_value = group
        _users(uow, applicant)

        service.notify_application_rejected(Application(user_id=applicant.id, group_id=group.id))
        await service.drain()

        assert len(sender.sent) == 1

    def test_without_running_loop_nothing_is_scheduled(
        self, service: NotificationService, email_sender: RecordingEmailSender
    ):
        service.notify_application_submitted(Application(user_id=uuid4(), group_id=uuid4()))

        assert service.pending == 0
        assert email_sender.sent == []
