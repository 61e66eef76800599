"""Pydantic v2 models for email records and their time index projection."""

import re
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mailroom.domain.errors import InvalidInputError
from mailroom.domain.types import TIME_FORMAT, EmailType


def build_type_year_month(email_type: EmailType | str, year: str | int, month: str | int) -> str:
    """Synthesize the partition key of the time index.

    The key is ``<type>#<YYYY>-<MM>``.  ``month`` is zero-padded, so ``"3"``
    and ``"03"`` both map to the same partition; the write path and the read
    path both go through this function.

    Args:
        email_type: The email type (``draft`` or ``sent``).
        year: Four-digit year.
        month: Month number, 1 to 12, with or without zero-padding.

    Returns:
        The partition key, e.g. ``"sent#2022-03"``.

    Raises:
        InvalidInputError: If any component is malformed.
    """
    try:
        email_type = EmailType(email_type)
    except ValueError:
        raise InvalidInputError(f"Unknown email type: {email_type!r}") from None

    year_str = str(year)
    if not re.fullmatch(r"[0-9]{4}", year_str):
        raise InvalidInputError(f"Year must be four digits: {year!r}")

    month_str = str(month)
    if not re.fullmatch(r"[0-9]{1,2}", month_str) or not 1 <= int(month_str) <= 12:
        raise InvalidInputError(f"Month must be between 1 and 12: {month!r}")

    return f"{email_type.value}#{year_str}-{int(month_str):02d}"


def format_time(moment: datetime) -> str:
    """Format a datetime as a second-precision UTC timestamp."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.strftime(TIME_FORMAT)


class EmailInput(BaseModel):
    """Email content as composed by the caller.

    Addresses and bodies are carried through unchanged; only ``text`` may be
    replaced by text generated from ``html``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    subject: str = ""
    from_: list[str] = Field(default_factory=list, alias="from")
    to: list[str] = Field(default_factory=list)
    cc: list[str] = Field(default_factory=list)
    bcc: list[str] = Field(default_factory=list)
    reply_to: list[str] = Field(default_factory=list)
    text: str = ""
    html: str = ""


class TimeIndex(BaseModel):
    """Projection of an email record used by the time index and listings."""

    model_config = ConfigDict(frozen=True)

    message_id: str
    email_type: EmailType
    time_updated: str  # %Y-%m-%dT%H:%M:%SZ, UTC

    @field_validator("time_updated")
    @classmethod
    def time_updated_must_match_format(cls, v: str) -> str:
        """Ensure time_updated is a second-precision UTC timestamp."""
        datetime.strptime(v, TIME_FORMAT)
        return v

    @property
    def type_year_month(self) -> str:
        """Partition key, always derived from ``email_type`` and ``time_updated``."""
        moment = datetime.strptime(self.time_updated, TIME_FORMAT)
        return build_type_year_month(self.email_type, moment.year, moment.month)

    def to_time_index(self) -> "TimeIndex":
        """Return the bare time index projection of this record."""
        return TimeIndex(
            message_id=self.message_id,
            email_type=self.email_type,
            time_updated=self.time_updated,
        )


class EmailRecord(TimeIndex, EmailInput):
    """A stored email: time index fields plus the full content."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ListResult(BaseModel):
    """One page of a time index listing, newest first."""

    model_config = ConfigDict(frozen=True)

    count: int
    items: list[TimeIndex]
    next_cursor: str | None = None
    has_more: bool = False
