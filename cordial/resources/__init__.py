"""REST resource operations."""

from .messages import (
    bulk_delete_messages,
    create_channel_message,
    delete_message,
    edit_message,
    get_channel_message,
    get_channel_messages,
)

__all__ = [
    "bulk_delete_messages",
    "create_channel_message",
    "delete_message",
    "edit_message",
    "get_channel_message",
    "get_channel_messages",
]
