"""Domain enumerations and fixed formats for email records."""

from enum import StrEnum

# Draft ids are this prefix followed by 32 lowercase hex characters.
DRAFT_ID_PREFIX = "draft-"

TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class EmailType(StrEnum):
    """Lifecycle status of an email record.

    The only transition is DRAFT -> SENT, performed atomically by the
    create workflow.
    """

    DRAFT = "draft"
    SENT = "sent"


class GenerateTextMode(StrEnum):
    """Controls whether the plain-text body is derived from the HTML body."""

    OFF = "off"
    AUTO = "auto"
    ON = "on"
