"""
Notification emails built as side-effect tasks.

Markup is intentionally plain; every interpolated value is HTML-escaped.
A provider failure is raised as EmailSendError so the dispatcher logs and
counts it.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from urllib.parse import urlencode

from portfolio.components.dispatch.models import SideEffectTask
from portfolio.core.ports.email import EmailPort, EmailSendError
from portfolio.domain.entities import ContactMessage, Subscriber


@dataclass(frozen=True)
class SiteInfo:
    name: str = "Portfolio"
    url: str = "http://localhost:3000"
    admin_email: str | None = None


def send_or_raise(
    email: EmailPort,
    recipient: str,
    subject: str,
    body_html: str,
    body_text: str,
) -> None:
    result = email.send_email(recipient, subject, body_html, body_text)
    if not result.ok:
        raise EmailSendError(recipient, result.error or result.status.value)


def unsubscribe_url(site: SiteInfo, subscriber: Subscriber) -> str:
    return f"{site.url.rstrip('/')}/unsubscribe?{urlencode({'id': subscriber.id})}"


def welcome_email(subscriber: Subscriber, site: SiteInfo) -> tuple[str, str, str]:
    """Returns (subject, html, text)."""
    name = subscriber.display_name
    link = unsubscribe_url(site, subscriber)
    subject = f"Welcome to the {site.name} newsletter, {name}!"
    html = (
        f"<p>Hi {escape(name)},</p>"
        f"<p>Thanks for subscribing to updates from {escape(site.name)}.</p>"
        f'<p><a href="{escape(link)}">Unsubscribe</a></p>'
    )
    text = (
        f"Hi {name},\n\n"
        f"Thanks for subscribing to updates from {site.name}.\n\n"
        f"Unsubscribe: {link}\n"
    )
    return subject, html, text


def contact_notification_email(contact: ContactMessage, site: SiteInfo) -> tuple[str, str, str]:
    subject = f"New Contact Form Submission: {contact.subject}"
    rows = [
        ("Name", contact.name),
        ("Email", contact.email),
        ("Company", contact.company),
        ("Phone", contact.phone),
        ("Subject", contact.subject),
    ]
    html_rows = "".join(
        f"<p><strong>{label}:</strong> {escape(value)}</p>" for label, value in rows if value
    )
    html = f"{html_rows}<p>{escape(contact.message)}</p>"
    text_rows = "\n".join(f"{label}: {value}" for label, value in rows if value)
    text = f"{text_rows}\n\n{contact.message}\n"
    return subject, html, text


def contact_confirmation_email(contact: ContactMessage, site: SiteInfo) -> tuple[str, str, str]:
    subject = f"Thank you for contacting me, {contact.name}!"
    html = (
        f"<p>Hi {escape(contact.name)},</p>"
        f"<p>Your message about &quot;{escape(contact.subject)}&quot; was received. "
        f"I will get back to you soon.</p>"
        f"<p>{escape(site.name)}</p>"
    )
    text = (
        f"Hi {contact.name},\n\n"
        f'Your message about "{contact.subject}" was received. I will get back to you soon.\n\n'
        f"{site.name}\n"
    )
    return subject, html, text


# --- Task builders ---


def welcome_email_task(email: EmailPort, subscriber: Subscriber, site: SiteInfo) -> SideEffectTask:
    subject, html, text = welcome_email(subscriber, site)
    return SideEffectTask(
        name="email.newsletter_welcome",
        fn=lambda: send_or_raise(email, subscriber.email, subject, html, text),
    )


def contact_tasks(email: EmailPort, contact: ContactMessage, site: SiteInfo) -> list[SideEffectTask]:
    """Owner notification (when an admin address is configured) plus sender confirmation."""
    tasks: list[SideEffectTask] = []
    admin_email = site.admin_email
    if admin_email:
        subject, html, text = contact_notification_email(contact, site)
        tasks.append(
            SideEffectTask(
                name="email.contact_notification",
                fn=lambda: send_or_raise(email, admin_email, subject, html, text),
            )
        )

    c_subject, c_html, c_text = contact_confirmation_email(contact, site)
    tasks.append(
        SideEffectTask(
            name="email.contact_confirmation",
            fn=lambda: send_or_raise(email, contact.email, c_subject, c_html, c_text),
        )
    )
    return tasks
