"""Rate-limit bucket keys for the channel message routes.

Discord partitions rate limits by major parameter; for message routes that
is the channel ID. Deletions on /channels/{id}/messages have their own,
stricter limit, so they must never share a bucket with the other verbs.
"""

from __future__ import annotations

from enum import Enum

from cordial.errors import MissingSnowflakeError
from cordial.snowflake import Snowflake, is_empty


class MessageVerb(str, Enum):
    LIST = "list"
    FETCH = "fetch"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    BULK_DELETE = "bulk_delete"


_DELETE_VERBS = frozenset({MessageVerb.DELETE, MessageVerb.BULK_DELETE})


def _channel(channel_id: Snowflake | None) -> str:
    if is_empty(channel_id):
        raise MissingSnowflakeError("channel id is required to derive a rate limit bucket")
    return f"c:{channel_id}"


def channel_messages(channel_id: Snowflake) -> str:
    return f"{_channel(channel_id)}:m"


def channel_messages_delete(channel_id: Snowflake) -> str:
    return f"{channel_messages(channel_id)}:d"


def message_bucket(channel_id: Snowflake, verb: MessageVerb) -> str:
    if verb in _DELETE_VERBS:
        return channel_messages_delete(channel_id)
    return channel_messages(channel_id)
