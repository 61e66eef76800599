"""Domain-specific exception classes for the mailroom."""


class MailroomError(Exception):
    """Base class for all domain errors in the mailroom."""


class InvalidInputError(MailroomError):
    """Raised when the store rejects a write or a request argument is malformed."""


class TextGenerationError(MailroomError):
    """Raised when plain text cannot be extracted from HTML content."""


class SendFailedError(MailroomError):
    """Raised when the transmission service fails to send an email."""


class TransitionFailedError(MailroomError):
    """Raised when the atomic draft -> sent transition fails.

    By the time this is raised the email has already been transmitted, so
    the draft record is still present and no sent record exists.  Both
    identifiers are kept so a reconciliation job can complete the
    transition later.

    Attributes:
        draft_id: Identifier of the draft record left in place.
        sent_id: Identifier assigned by the transmission service.
    """

    def __init__(self, draft_id: str, sent_id: str, reason: str = "") -> None:
        self.draft_id = draft_id
        self.sent_id = sent_id
        message = f"Failed to transition draft '{draft_id}' to sent '{sent_id}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DecodeError(MailroomError):
    """Raised when a stored record cannot be parsed back into a domain model."""


class StoreError(MailroomError):
    """Raised when the database cannot complete an operation, e.g. while locked."""


class CredentialsError(MailroomError):
    """Raised when no usable Gmail OAuth token is available."""
