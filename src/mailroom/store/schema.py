"""SQLite schema for email metadata persistence."""

from __future__ import annotations

import sqlite3
from pathlib import Path


def init_email_table(conn: sqlite3.Connection) -> None:
    """Create the emails table and its time index if they do not already exist.

    Each row holds one email record keyed by ``message_id``.  The composite
    index on ``(type_year_month, time_updated, message_id)`` serves the
    newest-first listing of one type/year/month partition.

    Args:
        conn: An open sqlite3.Connection (WAL mode recommended).
    """
    conn.execute("""
        CREATE TABLE IF NOT EXISTS emails (
            message_id TEXT PRIMARY KEY,
            email_type TEXT NOT NULL,
            type_year_month TEXT NOT NULL,
            time_updated TEXT NOT NULL,
            subject TEXT NOT NULL DEFAULT '',
            from_json TEXT NOT NULL DEFAULT '[]',
            to_json TEXT NOT NULL DEFAULT '[]',
            cc_json TEXT NOT NULL DEFAULT '[]',
            bcc_json TEXT NOT NULL DEFAULT '[]',
            reply_to_json TEXT NOT NULL DEFAULT '[]',
            text TEXT NOT NULL DEFAULT '',
            html TEXT NOT NULL DEFAULT ''
        )
    """)

    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_emails_type_year_month "
        "ON emails (type_year_month, time_updated DESC, message_id DESC)"
    )

    conn.commit()


def open_email_db(db_path: Path) -> sqlite3.Connection:
    """Open the email database with WAL mode and the schema in place.

    Args:
        db_path: Path to the SQLite database file.  Parent directories are
            created as needed.

    Returns:
        An open sqlite3.Connection.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA journal_mode=WAL")
    init_email_table(conn)
    return conn
