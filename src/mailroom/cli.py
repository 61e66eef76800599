"""Command-line entry point for creating and listing emails.

Wires the SQLite store and the Gmail sender into the create and listing
workflows, and configures structlog for the process.

Usage::

    python -m mailroom.cli create --to someone@example.com --subject Hi \\
        --html "<p>Hello</p>" --generate-text auto --send
    python -m mailroom.cli list sent 2022 03
    python -m mailroom.cli list draft 2022 3 --cursor <next_cursor>
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import structlog

from mailroom.auth.credentials import build_gmail_service
from mailroom.config import Settings, get_settings, validate_credentials
from mailroom.domain.errors import MailroomError
from mailroom.domain.models import EmailInput, EmailRecord
from mailroom.domain.types import EmailType, GenerateTextMode
from mailroom.email.api import SendEmailAPI
from mailroom.email.client import GmailSender
from mailroom.email.create import CreateInput, create
from mailroom.email.listing import list_by_year_month
from mailroom.store.schema import open_email_db
from mailroom.store.store import EmailStore

logger = structlog.get_logger()


def configure_logging(production: bool = False) -> None:
    """Configure structlog for production (JSON) or development (console).

    Production mode (*production=True*): JSON rendering at INFO level.
    Development mode: colored console rendering at DEBUG level.  Log lines
    go to stderr so command output on stdout stays machine-readable.

    Args:
        production: Enable production mode if ``True``.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if production:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        log_level = logging.INFO
    else:
        renderer = structlog.dev.ConsoleRenderer()
        log_level = logging.DEBUG

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service="mailroom")


class MailService:
    """Store plus sender, exposing the capabilities ``create`` needs.

    Args:
        store: The email store.
        sender: Transmission client.  Only required when sending.
    """

    def __init__(self, store: EmailStore, sender: SendEmailAPI | None = None) -> None:
        self._store = store
        self._sender = sender

    def insert(self, record: EmailRecord) -> None:
        self._store.insert(record)

    def transition(self, draft_id: str, sent: EmailRecord) -> None:
        self._store.transition(draft_id, sent)

    def send_email(self, email: EmailInput) -> str:
        if self._sender is None:
            raise MailroomError("No transmission client configured")
        return self._sender.send_email(email)


def build_sender(settings: Settings) -> SendEmailAPI:
    """Create a Gmail sender from the configured token file."""
    validate_credentials(settings)
    service = build_gmail_service(settings.gmail_token_path)
    return GmailSender(service, default_from=settings.from_email)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``create`` and ``list`` commands.

    Returns:
        A configured :class:`argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(description="Create, send, and list emails")
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Path to the email database (default: DB_PATH setting)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    create_cmd = commands.add_parser("create", help="Save an email as a draft, optionally send it")
    create_cmd.add_argument("--subject", type=str, default="")
    for flag in ("--from", "--to", "--cc", "--bcc", "--reply-to"):
        create_cmd.add_argument(flag, action="append", default=[], help="Repeatable address")
    create_cmd.add_argument("--text", type=str, default="")
    create_cmd.add_argument("--html", type=str, default="")
    create_cmd.add_argument(
        "--generate-text",
        type=str,
        choices=[m.value for m in GenerateTextMode],
        default=GenerateTextMode.OFF.value,
        help="Derive the text body from the HTML body (default: off)",
    )
    create_cmd.add_argument("--send", action="store_true", help="Send after saving the draft")

    list_cmd = commands.add_parser("list", help="List emails of one type and month, newest first")
    list_cmd.add_argument("email_type", choices=[t.value for t in EmailType])
    list_cmd.add_argument("year", type=str)
    list_cmd.add_argument("month", type=str)
    list_cmd.add_argument("--cursor", type=str, default=None, help="Cursor from a previous page")
    list_cmd.add_argument("--limit", type=int, default=None, help="Page size")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        The process exit code: 0 on success, 1 on a mailroom error.
    """
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(production=settings.production)

    db_path = Path(args.db) if args.db else settings.db_path
    conn = open_email_db(db_path)
    try:
        store = EmailStore(conn)
        if args.command == "create":
            request = CreateInput(
                email=EmailInput(
                    subject=args.subject,
                    from_=getattr(args, "from"),
                    to=args.to,
                    cc=args.cc,
                    bcc=args.bcc,
                    reply_to=args.reply_to,
                    text=args.text,
                    html=args.html,
                ),
                generate_text=GenerateTextMode(args.generate_text),
                send=args.send,
            )
            sender = build_sender(settings) if args.send else None
            record = create(MailService(store, sender), request)
            print(record.model_dump_json(by_alias=True, indent=2))
        else:
            result = list_by_year_month(
                store,
                args.email_type,
                args.year,
                args.month,
                args.cursor,
                limit=args.limit,
            )
            print(result.model_dump_json(indent=2))
    except MailroomError as exc:
        logger.error("command_failed", command=args.command, error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        conn.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
