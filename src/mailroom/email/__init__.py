"""Email workflows: create/send with atomic transition, and paginated listing."""

from mailroom.email.api import (
    CreateAndSendEmailAPI,
    DeleteItemAPI,
    GetItemAPI,
    PutItemAPI,
    QueryAPI,
    SendEmailAPI,
    TransactWriteItemsAPI,
)
from mailroom.email.client import GmailSender
from mailroom.email.create import CreateInput, create, new_draft_id, resolve_text
from mailroom.email.listing import list_by_year_month
from mailroom.email.text import html_to_text

__all__ = [
    "CreateAndSendEmailAPI",
    "CreateInput",
    "DeleteItemAPI",
    "GetItemAPI",
    "GmailSender",
    "PutItemAPI",
    "QueryAPI",
    "SendEmailAPI",
    "TransactWriteItemsAPI",
    "create",
    "html_to_text",
    "list_by_year_month",
    "new_draft_id",
    "resolve_text",
]
