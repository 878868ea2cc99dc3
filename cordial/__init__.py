"""Cordial - client-side resource model for Discord channel messages"""

__version__ = "0.1.0"

from cordial.client import Client  # noqa: E402
from cordial.errors import (  # noqa: E402
    CordialError,
    DecodeError,
    EncodingError,
    TransportError,
    ValidationError,
)
from cordial.message import Message  # noqa: E402
from cordial.params import (  # noqa: E402
    BulkDeleteMessagesParams,
    CreateMessageParams,
    EditMessageParams,
    FileParams,
    GetMessagesParams,
)
from cordial.snowflake import Snowflake  # noqa: E402

__all__ = [
    "BulkDeleteMessagesParams",
    "Client",
    "CordialError",
    "CreateMessageParams",
    "DecodeError",
    "EditMessageParams",
    "EncodingError",
    "FileParams",
    "GetMessagesParams",
    "Message",
    "Snowflake",
    "TransportError",
    "ValidationError",
]
