"""Capability sets required by the email workflows.

Each workflow depends only on the narrow protocol it uses, so tests can
substitute any object providing those methods.  ``EmailStore`` satisfies
the store protocols and ``GmailSender`` satisfies ``SendEmailAPI``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from mailroom.domain.models import EmailInput, EmailRecord
from mailroom.store.store import QueryPage


@runtime_checkable
class QueryAPI(Protocol):
    """Query one partition of the time index."""

    def query(
        self,
        type_year_month: str,
        *,
        exclusive_start_key: dict[str, str] | None = None,
        limit: int = 100,
    ) -> QueryPage: ...


@runtime_checkable
class GetItemAPI(Protocol):
    """Fetch a single email record."""

    def get(self, message_id: str) -> EmailRecord | None: ...


@runtime_checkable
class DeleteItemAPI(Protocol):
    """Delete a single email record."""

    def delete(self, message_id: str) -> bool: ...


@runtime_checkable
class PutItemAPI(Protocol):
    """Insert a new email record."""

    def insert(self, record: EmailRecord) -> None: ...


@runtime_checkable
class TransactWriteItemsAPI(Protocol):
    """Atomically replace a draft record with its sent record."""

    def transition(self, draft_id: str, sent: EmailRecord) -> None: ...


@runtime_checkable
class SendEmailAPI(Protocol):
    """Transmit an email and return the identifier assigned by the service."""

    def send_email(self, email: EmailInput) -> str: ...


@runtime_checkable
class CreateAndSendEmailAPI(PutItemAPI, TransactWriteItemsAPI, SendEmailAPI, Protocol):
    """Everything the create workflow needs: save, send, and transition."""
