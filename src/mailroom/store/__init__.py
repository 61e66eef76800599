"""Email metadata persistence package.

Provides the SQLite-backed email store, its schema, and the row and
cursor codecs used by the time index.
"""

from mailroom.store.schema import init_email_table
from mailroom.store.serializers import (
    decode_cursor,
    deserialize_record,
    deserialize_time_index,
    encode_cursor,
    serialize_record,
)
from mailroom.store.store import EmailStore, QueryPage

__all__ = [
    "EmailStore",
    "QueryPage",
    "decode_cursor",
    "deserialize_record",
    "deserialize_time_index",
    "encode_cursor",
    "init_email_table",
    "serialize_record",
]
