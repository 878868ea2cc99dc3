"""REST endpoint paths, relative to the API base URL."""

from __future__ import annotations

from cordial.snowflake import Snowflake


def channel_messages(channel_id: Snowflake) -> str:
    return f"/channels/{channel_id}/messages"


def channel_message(channel_id: Snowflake, message_id: Snowflake) -> str:
    return f"/channels/{channel_id}/messages/{message_id}"


def channel_messages_bulk_delete(channel_id: Snowflake) -> str:
    return f"/channels/{channel_id}/messages/bulk-delete"
