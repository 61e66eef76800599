"""List one type/year/month partition of the time index, newest first."""

from __future__ import annotations

import structlog

from mailroom.config import get_settings
from mailroom.domain.errors import InvalidInputError
from mailroom.domain.models import ListResult, build_type_year_month
from mailroom.domain.types import EmailType
from mailroom.email.api import QueryAPI
from mailroom.store.serializers import decode_cursor, deserialize_time_index, encode_cursor

logger = structlog.get_logger()


def list_by_year_month(
    api: QueryAPI,
    email_type: EmailType | str,
    year: str | int,
    month: str | int,
    next_cursor: str | None = None,
    *,
    limit: int | None = None,
) -> ListResult:
    """Return one page of emails of a type updated in a given month.

    Items are ordered by ``time_updated`` descending.  Pass the returned
    ``next_cursor`` back to fetch the following page; it is ``None`` once
    the partition is exhausted.

    Args:
        api: Store capable of querying the time index.
        email_type: ``draft`` or ``sent``.
        year: Four-digit year.
        month: Month, ``"3"`` and ``"03"`` are equivalent.
        next_cursor: Cursor returned by the previous page, if any.
        limit: Maximum number of items in the page.  Defaults to the
            ``list_page_size`` setting.

    Returns:
        The page as a ``ListResult``.

    Raises:
        InvalidInputError: If the partition arguments or the cursor are
            malformed, or the cursor belongs to another partition.
        DecodeError: If any row of the page is malformed.  No partial page
            is returned.
    """
    type_year_month = build_type_year_month(email_type, year, month)

    start_key: dict[str, str] | None = None
    if next_cursor:
        start_key = decode_cursor(next_cursor)
        if start_key["type_year_month"] != type_year_month:
            msg = (
                f"Cursor belongs to partition {start_key['type_year_month']!r}, "
                f"not {type_year_month!r}"
            )
            raise InvalidInputError(msg)

    logger.info("listing_page", type_year_month=type_year_month, resumed=start_key is not None)

    if limit is None:
        limit = get_settings().list_page_size

    page = api.query(type_year_month, exclusive_start_key=start_key, limit=limit)
    items = [deserialize_time_index(row) for row in page.rows]

    cursor = encode_cursor(page.last_evaluated_key) if page.last_evaluated_key else None
    return ListResult(
        count=len(items),
        items=items,
        next_cursor=cursor,
        has_more=cursor is not None,
    )
