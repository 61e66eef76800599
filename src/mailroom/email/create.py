"""Create an email as a draft and optionally send it.

The draft is always saved before anything is transmitted.  When sending,
the draft is replaced by a sent record keyed by the identifier the
transmission service returns, in a single store transaction.  Nothing is
retried here; errors from the store, the text extractor, and the
transmission service reach the caller unchanged.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime

import structlog
from pydantic import BaseModel, ConfigDict, Field

from mailroom.domain.errors import TransitionFailedError
from mailroom.domain.models import EmailInput, EmailRecord, format_time
from mailroom.domain.types import DRAFT_ID_PREFIX, EmailType, GenerateTextMode
from mailroom.email.api import CreateAndSendEmailAPI
from mailroom.email.text import html_to_text

logger = structlog.get_logger()


class CreateInput(BaseModel):
    """Arguments of ``create``: the email plus how to handle it."""

    model_config = ConfigDict(frozen=True)

    email: EmailInput = Field(default_factory=EmailInput)
    generate_text: GenerateTextMode = GenerateTextMode.OFF
    send: bool = False


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def resolve_text(
    email: EmailInput,
    mode: GenerateTextMode,
    generate_text: Callable[[str], str] = html_to_text,
) -> str:
    """Pick the plain-text body according to the generation mode.

    ``off`` keeps the given text, ``on`` always regenerates it from the
    HTML, and ``auto`` regenerates only when the given text is empty.
    """
    if mode == GenerateTextMode.ON:
        return generate_text(email.html)
    if mode == GenerateTextMode.AUTO and not email.text:
        return generate_text(email.html)
    return email.text


def new_draft_id(random_bytes: Callable[[int], bytes] = secrets.token_bytes) -> str:
    """Return a fresh draft identifier: the draft prefix and 32 hex characters."""
    return DRAFT_ID_PREFIX + random_bytes(16).hex()


def create(
    api: CreateAndSendEmailAPI,
    request: CreateInput,
    *,
    now: Callable[[], datetime] = _utcnow,
    random_bytes: Callable[[int], bytes] = secrets.token_bytes,
    generate_text: Callable[[str], str] = html_to_text,
) -> EmailRecord:
    """Save an email as a draft and, if requested, send it.

    Args:
        api: Store and transmission capabilities.
        request: The email, the text generation mode, and the send flag.
        now: Clock used for ``time_updated``.
        random_bytes: Source of randomness for the draft identifier.
        generate_text: HTML to plain-text converter.  Must raise
            ``TextGenerationError`` on failure.

    Returns:
        The saved draft when ``request.send`` is false, otherwise the sent
        record keyed by the transmission service's identifier.

    Raises:
        TextGenerationError: If text generation is required and fails.
        InvalidInputError: If the store rejects the draft.
        SendFailedError: If transmission fails.  The draft stays saved.
        TransitionFailedError: If the email was sent but the draft could
            not be replaced by the sent record.  The draft stays saved.
    """
    text = resolve_text(request.email, request.generate_text, generate_text)
    content = request.email.model_dump(by_alias=False)
    content["text"] = text

    draft = EmailRecord(
        message_id=new_draft_id(random_bytes),
        email_type=EmailType.DRAFT,
        time_updated=format_time(now()),
        **content,
    )
    api.insert(draft)
    logger.info("draft_saved", message_id=draft.message_id, time_updated=draft.time_updated)

    if not request.send:
        return draft

    sent_id = api.send_email(draft)
    logger.info("email_sent", draft_id=draft.message_id, message_id=sent_id)

    sent = draft.model_copy(update={"message_id": sent_id, "email_type": EmailType.SENT})
    try:
        api.transition(draft.message_id, sent)
    except TransitionFailedError:
        logger.error(
            "email_transition_failed",
            draft_id=draft.message_id,
            message_id=sent_id,
        )
        raise

    logger.info("email_transitioned", draft_id=draft.message_id, message_id=sent_id)
    return sent
