"""SQLite-backed email store with an index over type, year, and month.

Follows the same conventions as the schema module: accepts a
sqlite3.Connection, uses parameterized queries exclusively, and commits
synchronously after writes.  SQLite errors are translated into domain
errors at this boundary.
"""

from __future__ import annotations

import sqlite3
from typing import Any, NamedTuple

import structlog

from mailroom.domain.errors import InvalidInputError, StoreError, TransitionFailedError
from mailroom.domain.models import EmailRecord
from mailroom.store.serializers import deserialize_record, serialize_record

logger = structlog.get_logger()

_COLUMNS = (
    "message_id",
    "email_type",
    "type_year_month",
    "time_updated",
    "subject",
    "from_json",
    "to_json",
    "cc_json",
    "bcc_json",
    "reply_to_json",
    "text",
    "html",
)

_INSERT_SQL = (
    f"INSERT INTO emails ({', '.join(_COLUMNS)}) "
    f"VALUES ({', '.join('?' for _ in _COLUMNS)})"
)


class QueryPage(NamedTuple):
    """Raw rows of one index page and the key of the last row returned.

    ``last_evaluated_key`` is ``None`` when the partition is exhausted.
    """

    rows: list[dict[str, Any]]
    last_evaluated_key: dict[str, str] | None


class EmailStore:
    """Persist and retrieve email records in SQLite.

    Each row is one email record keyed by ``message_id``.  The
    ``type_year_month`` column is always written from the record's own
    type and timestamp.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize with an open database connection.

        Args:
            conn: An open sqlite3.Connection whose database already has the
                  ``emails`` table (see ``init_email_table``).
        """
        self._conn = conn

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def insert(self, record: EmailRecord) -> None:
        """Insert a new email record.

        Args:
            record: The record to persist.

        Raises:
            InvalidInputError: If the row is rejected, e.g. because a record
                with the same ``message_id`` already exists.
            StoreError: If the database cannot complete the write, e.g.
                because it is locked.
        """
        row = serialize_record(record)
        try:
            with self._conn:
                self._conn.execute(_INSERT_SQL, tuple(row[c] for c in _COLUMNS))
        except sqlite3.IntegrityError as exc:
            raise InvalidInputError(
                f"Email {record.message_id!r} rejected by store: {exc}"
            ) from exc
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to insert email {record.message_id!r}: {exc}") from exc

    def delete(self, message_id: str) -> bool:
        """Delete an email record by id.

        Args:
            message_id: The identifier of the record to remove.

        Returns:
            ``True`` if a record was deleted, ``False`` if none existed.
        """
        try:
            with self._conn:
                cursor = self._conn.execute(
                    "DELETE FROM emails WHERE message_id = ?",
                    (message_id,),
                )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to delete email {message_id!r}: {exc}") from exc
        return cursor.rowcount > 0

    def transition(self, draft_id: str, sent: EmailRecord) -> None:
        """Replace a draft with its sent record in a single transaction.

        The draft is deleted and the sent record inserted together; if either
        step fails neither takes effect.

        Args:
            draft_id: Identifier of the draft to remove.
            sent: The sent record to insert.

        Raises:
            TransitionFailedError: If the draft does not exist or the
                transaction fails.
        """
        row = serialize_record(sent)
        try:
            with self._conn:
                cursor = self._conn.execute(
                    "DELETE FROM emails WHERE message_id = ?",
                    (draft_id,),
                )
                if cursor.rowcount != 1:
                    raise TransitionFailedError(draft_id, sent.message_id, "draft not found")
                self._conn.execute(_INSERT_SQL, tuple(row[c] for c in _COLUMNS))
        except sqlite3.Error as exc:
            raise TransitionFailedError(draft_id, sent.message_id, str(exc)) from exc

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def get(self, message_id: str) -> EmailRecord | None:
        """Load a single email record.

        Returns:
            The record, or ``None`` if no record has this id.

        Raises:
            DecodeError: If the stored row is malformed.
            StoreError: If the database cannot be read.
        """
        try:
            row = self._conn.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM emails WHERE message_id = ?",
                (message_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to read email {message_id!r}: {exc}") from exc
        if row is None:
            return None
        return deserialize_record(dict(zip(_COLUMNS, row, strict=True)))

    def query(
        self,
        type_year_month: str,
        *,
        exclusive_start_key: dict[str, str] | None = None,
        limit: int = 100,
    ) -> QueryPage:
        """Read one page of a partition of the time index, newest first.

        Rows are ordered by ``time_updated`` descending, ties broken by
        ``message_id`` descending.  When ``exclusive_start_key`` is given the
        scan resumes strictly after that row.

        Args:
            type_year_month: Partition key, e.g. ``"sent#2022-03"``.
            exclusive_start_key: Key of the last row of the previous page.
            limit: Maximum number of rows to return.

        Returns:
            A ``QueryPage``.  Its ``last_evaluated_key`` is set only when
            more rows remain in the partition.
        """
        if limit < 1:
            raise InvalidInputError(f"Limit must be positive: {limit}")

        conditions = ["type_year_month = ?"]
        params: list[str | int] = [type_year_month]

        if exclusive_start_key is not None:
            conditions.append("(time_updated < ? OR (time_updated = ? AND message_id < ?))")
            params.extend([
                exclusive_start_key["time_updated"],
                exclusive_start_key["time_updated"],
                exclusive_start_key["message_id"],
            ])

        # Fetch one extra row to learn whether the partition continues.
        params.append(limit + 1)
        try:
            cursor = self._conn.execute(
                "SELECT message_id, email_type, type_year_month, time_updated FROM emails "
                f"WHERE {' AND '.join(conditions)} "
                "ORDER BY time_updated DESC, message_id DESC LIMIT ?",
                params,
            )
            columns = [d[0] for d in cursor.description]
            rows = [dict(zip(columns, r, strict=True)) for r in cursor.fetchall()]
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to query {type_year_month!r}: {exc}") from exc

        last_evaluated_key: dict[str, str] | None = None
        if len(rows) > limit:
            rows = rows[:limit]
            last = rows[-1]
            last_evaluated_key = {
                "message_id": last["message_id"],
                "type_year_month": last["type_year_month"],
                "time_updated": last["time_updated"],
            }

        logger.debug(
            "index_queried",
            type_year_month=type_year_month,
            returned=len(rows),
            has_more=last_evaluated_key is not None,
        )
        return QueryPage(rows=rows, last_evaluated_key=last_evaluated_key)
