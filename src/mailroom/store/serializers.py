"""Row and cursor codecs for the email store.

List fields are stored as JSON arrays.  Rows read back from the time index
are validated in full: a row whose stored partition key disagrees with the
one derived from ``email_type`` and ``time_updated`` is treated as
malformed.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from mailroom.domain.errors import DecodeError, InvalidInputError
from mailroom.domain.models import EmailRecord, TimeIndex

_LIST_COLUMNS: dict[str, str] = {
    "from_": "from_json",
    "to": "to_json",
    "cc": "cc_json",
    "bcc": "bcc_json",
    "reply_to": "reply_to_json",
}

_CURSOR_KEYS = ("message_id", "type_year_month", "time_updated")


def serialize_record(record: EmailRecord) -> dict[str, Any]:
    """Convert an email record into a column -> value mapping.

    Args:
        record: The record to store.

    Returns:
        A dict keyed by column name, including the derived
        ``type_year_month`` partition key.
    """
    row: dict[str, Any] = {
        "message_id": record.message_id,
        "email_type": record.email_type.value,
        "type_year_month": record.type_year_month,
        "time_updated": record.time_updated,
        "subject": record.subject,
        "text": record.text,
        "html": record.html,
    }
    for field, column in _LIST_COLUMNS.items():
        row[column] = json.dumps(getattr(record, field))
    return row


def _check_partition(item: TimeIndex, row: Mapping[str, Any]) -> None:
    stored = row["type_year_month"]
    if stored != item.type_year_month:
        msg = (
            f"Stored partition {stored!r} for {item.message_id!r} does not match "
            f"derived partition {item.type_year_month!r}"
        )
        raise DecodeError(msg)


def deserialize_time_index(row: Mapping[str, Any]) -> TimeIndex:
    """Decode a time index row into a ``TimeIndex``.

    Args:
        row: A mapping with ``message_id``, ``email_type``,
            ``time_updated``, and ``type_year_month``.

    Returns:
        The decoded projection.

    Raises:
        DecodeError: If the row is missing fields, has invalid values, or
            its partition key disagrees with its type and timestamp.
    """
    try:
        item = TimeIndex(
            message_id=row["message_id"],
            email_type=row["email_type"],
            time_updated=row["time_updated"],
        )
        _check_partition(item, row)
    except (KeyError, IndexError, ValidationError, InvalidInputError) as exc:
        raise DecodeError(f"Malformed time index row: {exc}") from exc
    return item


def deserialize_record(row: Mapping[str, Any]) -> EmailRecord:
    """Decode a full ``emails`` row into an ``EmailRecord``.

    Raises:
        DecodeError: If the row cannot be parsed back into a record.
    """
    try:
        lists = {field: json.loads(row[column]) for field, column in _LIST_COLUMNS.items()}
        record = EmailRecord(
            message_id=row["message_id"],
            email_type=row["email_type"],
            time_updated=row["time_updated"],
            subject=row["subject"],
            text=row["text"],
            html=row["html"],
            **lists,
        )
        _check_partition(record, row)
    except (
        KeyError, IndexError, TypeError, json.JSONDecodeError, ValidationError, InvalidInputError
    ) as exc:
        raise DecodeError(f"Malformed email row: {exc}") from exc
    return record


def encode_cursor(key: Mapping[str, str]) -> str:
    """Encode a last-evaluated key as an opaque URL-safe cursor."""
    payload = json.dumps({k: key[k] for k in _CURSOR_KEYS}, separators=(",", ":"))
    return base64.urlsafe_b64encode(payload.encode()).decode()


def decode_cursor(cursor: str) -> dict[str, str]:
    """Decode a cursor produced by ``encode_cursor``.

    Raises:
        InvalidInputError: If the cursor is not a valid encoded key.
    """
    try:
        decoded = json.loads(base64.urlsafe_b64decode(cursor.encode()))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid cursor: {cursor!r}") from exc

    if not isinstance(decoded, dict) or not all(
        isinstance(decoded.get(k), str) for k in _CURSOR_KEYS
    ):
        raise InvalidInputError(f"Invalid cursor: {cursor!r}")
    return {k: decoded[k] for k in _CURSOR_KEYS}
