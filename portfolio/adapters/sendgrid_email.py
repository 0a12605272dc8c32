"""
SendGrid Email Adapter.

Sends transactional email through the SendGrid v3 mail/send HTTP API.
Provider rejections and transport errors become FAILED results; the
caller (a side-effect task) decides whether that is worth raising.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import httpx

from portfolio.core.ports.email import EmailAddress, EmailResult, EmailStatus

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


class SendGridEmailAdapter:
    """EmailPort implementation backed by SendGrid."""

    def __init__(
        self,
        api_key: str,
        sender: EmailAddress,
        *,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        if not api_key:
            raise ValueError("SendGrid API key is required")
        self._api_key = api_key
        self._sender = sender
        self._client = client or httpx.Client(timeout=timeout)

    def _payload(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str | None,
    ) -> dict[str, object]:
        sender: dict[str, str] = {"email": self._sender.email}
        if self._sender.name:
            sender["name"] = self._sender.name

        content = []
        if body_text:
            content.append({"type": "text/plain", "value": body_text})
        content.append({"type": "text/html", "value": body_html})

        return {
            "personalizations": [{"to": [{"email": recipient}]}],
            "from": sender,
            "subject": subject,
            "content": content,
        }

    def send_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str | None = None,
    ) -> EmailResult:
        try:
            response = self._client.post(
                SENDGRID_SEND_URL,
                json=self._payload(recipient, subject, body_html, body_text),
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.HTTPError as e:
            logger.error("SendGrid request to %s failed: %s", recipient, e)
            return EmailResult.failed(recipient, str(e))

        if response.status_code >= 400:
            logger.error(
                "SendGrid rejected email to %s: %s %s",
                recipient,
                response.status_code,
                response.text[:200],
            )
            return EmailResult.failed(recipient, f"HTTP {response.status_code}")

        message_id = response.headers.get("X-Message-Id")
        logger.info("Email queued for %s (message_id=%s)", recipient, message_id)
        return EmailResult(
            status=EmailStatus.QUEUED,
            message_id=message_id,
            recipient=recipient,
            sent_at=datetime.now(UTC),
        )

    def close(self) -> None:
        self._client.close()
