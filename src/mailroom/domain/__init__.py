"""Core domain types, models, and errors for the mailroom."""

from mailroom.domain.errors import (
    CredentialsError,
    DecodeError,
    InvalidInputError,
    MailroomError,
    SendFailedError,
    StoreError,
    TextGenerationError,
    TransitionFailedError,
)
from mailroom.domain.models import (
    EmailInput,
    EmailRecord,
    ListResult,
    TimeIndex,
    build_type_year_month,
)
from mailroom.domain.types import DRAFT_ID_PREFIX, TIME_FORMAT, EmailType, GenerateTextMode

__all__ = [
    "DRAFT_ID_PREFIX",
    "CredentialsError",
    "DecodeError",
    "EmailInput",
    "EmailRecord",
    "EmailType",
    "GenerateTextMode",
    "InvalidInputError",
    "ListResult",
    "MailroomError",
    "SendFailedError",
    "StoreError",
    "TIME_FORMAT",
    "TextGenerationError",
    "TimeIndex",
    "TransitionFailedError",
    "build_type_year_month",
]
