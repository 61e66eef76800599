"""Gmail API transmission client.

Provides the ``GmailSender`` class, which composes an RFC 2822 MIME
message from an email record and sends it through ``users.messages.send``.
"""

from __future__ import annotations

import base64
from email.message import EmailMessage
from typing import Any

import structlog
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from mailroom.domain.errors import SendFailedError
from mailroom.domain.models import EmailInput

logger = structlog.get_logger()


class GmailSender:
    """Wrapper around the Gmail API service for sending emails.

    All calls go through the provided Gmail API service resource (obtained
    via ``build_gmail_service``).  No real network calls are made by this
    class directly -- the service object handles transport.

    Args:
        service: An authenticated Gmail API v1 service resource.
        default_from: Address used as ``From`` when the email has none.
    """

    def __init__(self, service: Any, default_from: str = "") -> None:
        self._service = service
        self._default_from = default_from

    def build_message(self, email: EmailInput) -> EmailMessage:
        """Compose the MIME message for an email.

        The plain-text body is always present; when ``email.html`` is set it
        is attached as a ``text/html`` alternative.
        """
        message = EmailMessage()
        message.set_content(email.text)
        if email.html:
            message.add_alternative(email.html, subtype="html")

        sender = email.from_ or ([self._default_from] if self._default_from else [])
        headers = {
            "From": sender,
            "To": email.to,
            "Cc": email.cc,
            "Bcc": email.bcc,
            "Reply-To": email.reply_to,
        }
        for name, addresses in headers.items():
            if addresses:
                message[name] = ", ".join(addresses)
        message["Subject"] = email.subject
        return message

    def send_email(self, email: EmailInput) -> str:
        """Send an email and return the Gmail message ID.

        Args:
            email: The content and recipients to send.

        Returns:
            The ``id`` assigned by Gmail to the sent message.

        Raises:
            SendFailedError: If the message cannot be composed, or the API
                call fails or returns no ID.
        """
        try:
            message = self.build_message(email)
            encoded = base64.urlsafe_b64encode(message.as_bytes()).decode()
            result: dict[str, Any] = (
                self._service.users()
                .messages()
                .send(userId="me", body={"raw": encoded})
                .execute()
            )
        except (HttpError, GoogleAuthError, OSError) as exc:
            raise SendFailedError(f"Gmail send failed: {exc}") from exc
        except ValueError as exc:
            raise SendFailedError(f"Invalid email headers: {exc}") from exc

        message_id = result.get("id")
        if not message_id:
            raise SendFailedError(f"Gmail send returned no message id: {result!r}")

        logger.info("gmail_message_sent", message_id=message_id, thread_id=result.get("threadId"))
        return str(message_id)
