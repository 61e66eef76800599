"""Shared pytest fixtures for the mailroom test suite."""

import sqlite3

import pytest

from mailroom.domain.models import EmailInput, EmailRecord
from mailroom.domain.types import EmailType
from mailroom.store.schema import init_email_table
from mailroom.store.store import EmailStore

ADDRESS = "example@example.com"


@pytest.fixture
def conn() -> sqlite3.Connection:
    """In-memory SQLite connection with the emails table initialized."""
    connection = sqlite3.connect(":memory:")
    init_email_table(connection)
    return connection


@pytest.fixture
def store(conn: sqlite3.Connection) -> EmailStore:
    """EmailStore backed by the in-memory connection."""
    return EmailStore(conn)


@pytest.fixture
def sample_email() -> EmailInput:
    """A representative email with every address field populated."""
    return EmailInput(
        subject="subject",
        from_=[ADDRESS],
        to=[ADDRESS],
        cc=[ADDRESS],
        bcc=[ADDRESS],
        reply_to=[ADDRESS],
        text="text",
        html="<p>example</p>",
    )


@pytest.fixture
def sample_draft(sample_email: EmailInput) -> EmailRecord:
    """A draft record built from ``sample_email``."""
    return EmailRecord(
        message_id="draft-" + "0" * 32,
        email_type=EmailType.DRAFT,
        time_updated="2022-03-16T16:55:45Z",
        **sample_email.model_dump(),
    )
