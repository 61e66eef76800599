"""Tests for the GmailSender Gmail API wrapper."""

from __future__ import annotations

import base64
from email import message_from_bytes
from unittest.mock import MagicMock

import pytest
from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from mailroom.domain.errors import SendFailedError
from mailroom.domain.models import EmailInput
from mailroom.email.client import GmailSender

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

DEFAULT_FROM = "mailroom@company.com"


def _make_service(message_id: str = "gmail-id-1") -> MagicMock:
    """Create a mock Gmail API service whose send returns ``message_id``."""
    service = MagicMock()
    service.users().messages().send().execute.return_value = {
        "id": message_id,
        "threadId": "thread-1",
    }
    service.reset_mock()
    return service


def _sent_message(service: MagicMock):
    payload = service.users().messages().send.call_args[1]["body"]
    return message_from_bytes(base64.urlsafe_b64decode(payload["raw"]))


# ---------------------------------------------------------------------------
# GmailSender.send_email tests
# ---------------------------------------------------------------------------


class TestGmailSenderSend:
    """Tests for GmailSender.send_email."""

    def test_returns_gmail_message_id(self, sample_email: EmailInput) -> None:
        sender = GmailSender(_make_service("abc123"), default_from=DEFAULT_FROM)
        assert sender.send_email(sample_email) == "abc123"

    def test_calls_messages_send_once_for_me(self, sample_email: EmailInput) -> None:
        service = _make_service()
        GmailSender(service).send_email(sample_email)

        service.users().messages().send.assert_called_once()
        assert service.users().messages().send.call_args[1]["userId"] == "me"

    def test_sets_headers(self, sample_email: EmailInput) -> None:
        service = _make_service()
        GmailSender(service).send_email(sample_email)

        msg = _sent_message(service)
        assert msg["Subject"] == "subject"
        assert msg["From"] == "example@example.com"
        assert msg["To"] == "example@example.com"
        assert msg["Cc"] == "example@example.com"
        assert msg["Bcc"] == "example@example.com"
        assert msg["Reply-To"] == "example@example.com"

    def test_joins_multiple_recipients(self) -> None:
        service = _make_service()
        email = EmailInput(to=["a@example.com", "b@example.com"], text="hi")
        GmailSender(service).send_email(email)

        assert _sent_message(service)["To"] == "a@example.com, b@example.com"

    def test_uses_default_from(self) -> None:
        service = _make_service()
        GmailSender(service, default_from=DEFAULT_FROM).send_email(
            EmailInput(to=["a@example.com"], text="hi")
        )

        assert _sent_message(service)["From"] == DEFAULT_FROM

    def test_omits_empty_headers(self) -> None:
        service = _make_service()
        GmailSender(service).send_email(EmailInput(to=["a@example.com"], text="hi"))

        msg = _sent_message(service)
        assert msg["Cc"] is None
        assert msg["From"] is None

    def test_html_alternative(self, sample_email: EmailInput) -> None:
        service = _make_service()
        GmailSender(service).send_email(sample_email)

        msg = _sent_message(service)
        assert msg.get_content_type() == "multipart/alternative"
        types = [part.get_content_type() for part in msg.walk()]
        assert "text/plain" in types
        assert "text/html" in types

    def test_text_only(self) -> None:
        service = _make_service()
        GmailSender(service).send_email(EmailInput(to=["a@example.com"], text="plain body"))

        msg = _sent_message(service)
        assert msg.get_content_type() == "text/plain"
        assert "plain body" in msg.get_payload()

    def test_http_error_raises_send_failed(self, sample_email: EmailInput) -> None:
        service = MagicMock()
        service.users().messages().send().execute.side_effect = HttpError(
            MagicMock(status=400, reason="Bad Request"), b"invalid recipient"
        )

        with pytest.raises(SendFailedError, match="Gmail send failed"):
            GmailSender(service).send_email(sample_email)

    def test_missing_id_raises_send_failed(self, sample_email: EmailInput) -> None:
        service = MagicMock()
        service.users().messages().send().execute.return_value = {}

        with pytest.raises(SendFailedError, match="no message id"):
            GmailSender(service).send_email(sample_email)

    def test_newline_in_subject_raises_send_failed(self) -> None:
        service = _make_service()
        email = EmailInput(subject="hi\nthere", to=["a@example.com"], text="hi")

        with pytest.raises(SendFailedError, match="Invalid email headers"):
            GmailSender(service).send_email(email)

        service.users().messages().send.assert_not_called()

    def test_newline_in_address_raises_send_failed(self) -> None:
        email = EmailInput(to=["a@example.com\r\nBcc: x@example.com"], text="hi")

        with pytest.raises(SendFailedError):
            GmailSender(_make_service()).send_email(email)

    def test_timeout_raises_send_failed(self, sample_email: EmailInput) -> None:
        service = MagicMock()
        service.users().messages().send().execute.side_effect = TimeoutError("timed out")

        with pytest.raises(SendFailedError, match="timed out"):
            GmailSender(service).send_email(sample_email)

    def test_auth_refresh_error_raises_send_failed(self, sample_email: EmailInput) -> None:
        service = MagicMock()
        service.users().messages().send().execute.side_effect = RefreshError("token revoked")

        with pytest.raises(SendFailedError, match="token revoked"):
            GmailSender(service).send_email(sample_email)
