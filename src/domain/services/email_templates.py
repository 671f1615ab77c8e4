"""Email templates for workflow notifications.

Templates use ``str.format`` placeholders; every value is HTML-escaped
before substitution.
"""

from dataclasses import dataclass
from html import escape
from typing import Any

_LAYOUT = (
    '<div style="font-family:sans-serif;max-width:560px;margin:0 auto;">'
    '<h2>{heading}</h2>'
    "{content}"
    '<p style="color:#888;font-size:12px;">{footer}</p>'
    "</div>"
)

_BUTTON = (
    '<p><a href="{url}" style="background:#111;color:#fff;padding:10px 16px;'
    'border-radius:6px;text-decoration:none;">{label}</a></p>'
)


@dataclass(frozen=True)
class EmailTemplate:
    """A subject line, heading, body and footer with named placeholders."""

    subject: str
    heading: str
    content: str
    footer: str

    def render(self, **values: Any) -> tuple[str, str]:
        """Return ``(subject, html_body)`` with ``values`` substituted."""
        raw = {key: "" if value is None else str(value) for key, value in values.items()}
        escaped = {key: escape(value) for key, value in raw.items()}
        subject = self.subject.format_map(raw)
        body = _LAYOUT.format(
            heading=self.heading.format_map(escaped),
            content=self.content.format_map(escaped),
            footer=self.footer.format_map(escaped),
        )
        return subject, body


APPLICATION_SUBMITTED = EmailTemplate(
    subject="New application for {group_name}",
    heading="New Application Received",
    content=(
        "<p>Hi {curator_name},</p>"
        "<p>Someone has applied to join your group <strong>{group_name}</strong>.</p>"
        "<p><strong>Applicant:</strong> {applicant_name}<br>"
        "<strong>Email:</strong> {applicant_email}<br>"
        "<strong>Profile:</strong> {profile_link}</p>"
        "<p><strong>Interest statement:</strong><br>{interest_statement}</p>"
        + _BUTTON.format(url="{review_url}", label="Review Application")
    ),
    footer="You are receiving this email because you are a curator on ArCa.",
)

APPLICATION_APPROVED = EmailTemplate(
    subject="Welcome to {group_name}!",
    heading="Welcome to {group_name}!",
    content=(
        "<p>Hi {applicant_name},</p>"
        "<p>Great news! Your application to join <strong>{group_name}</strong> "
        "has been approved.</p>"
        "<p>You now have full access to view deals, documents, and participate "
        "in discussions.</p>"
        + _BUTTON.format(url="{group_url}", label="View Group")
    ),
    footer="You are receiving this email because you applied to a group on ArCa.",
)

APPLICATION_REJECTED = EmailTemplate(
    subject="Application update for {group_name}",
    heading="Application Update",
    content=(
        "<p>Hi {applicant_name},</p>"
        "<p>Thank you for your interest in joining <strong>{group_name}</strong>.</p>"
        "<p>After reviewing your application, the curator has decided not to "
        "move forward at this time.</p>"
    ),
    footer="You are receiving this email because you applied to a group on ArCa.",
)

COMMENT_REPLY = EmailTemplate(
    subject="New reply on {deal_name}",
    heading="New Reply to Your Comment",
    content=(
        "<p>Hi {recipient_name},</p>"
        "<p><strong>{replier_name}</strong> replied to your comment on "
        "<strong>{deal_name}</strong>.</p>"
        "<blockquote>&quot;{reply_preview}&quot;</blockquote>"
        + _BUTTON.format(url="{view_url}", label="View Reply")
    ),
    footer="You are receiving this because someone replied to your comment.",
)

NEW_COMMENT = EmailTemplate(
    subject="New comment on {deal_name}",
    heading="New Comment on Your Deal",
    content=(
        "<p>Hi {curator_name},</p>"
        "<p><strong>{commenter_name}</strong> commented on "
        "<strong>{deal_name}</strong>.</p>"
        "<blockquote>&quot;{comment_preview}&quot;</blockquote>"
        + _BUTTON.format(url="{view_url}", label="View Comment")
    ),
    footer="You are receiving this because you are the curator for this deal.",
)
