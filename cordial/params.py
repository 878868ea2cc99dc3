"""Outbound request parameters for the channel message endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, BinaryIO
from urllib.parse import urlencode

from cordial.core.lockable import Lockable
from cordial.errors import (
    MissingSnowflakeError,
    TooFewMessagesError,
    TooManyMessagesError,
    ValidationError,
)
from cordial.models import Embed
from cordial.snowflake import Snowflake, is_empty

if TYPE_CHECKING:
    from cordial.message import Message

BULK_DELETE_MIN = 2
BULK_DELETE_MAX = 100
MESSAGES_LIMIT_MAX = 100


@dataclass
class GetMessagesParams:
    """Query for listing channel messages.

    around, before and after are mutually exclusive.
    """
    around: Snowflake | None = None
    before: Snowflake | None = None
    after: Snowflake | None = None
    limit: int | None = None

    def validate(self) -> None:
        anchors = [a for a in (self.around, self.before, self.after) if not is_empty(a)]
        if len(anchors) > 1:
            raise ValidationError("around, before and after are mutually exclusive")
        if self.limit is not None and not 1 <= self.limit <= MESSAGES_LIMIT_MAX:
            raise ValidationError(f"limit must be between 1 and {MESSAGES_LIMIT_MAX}")

    def query_string(self) -> str:
        query: list[tuple[str, str]] = []
        for key in ("around", "before", "after"):
            value = getattr(self, key)
            if not is_empty(value):
                query.append((key, str(value)))
        if self.limit:
            query.append(("limit", str(self.limit)))
        return f"?{urlencode(query)}" if query else ""


@dataclass
class FileParams:
    """One attachment to upload. *reader* is any binary stream or raw bytes."""
    reader: BinaryIO | bytes
    filename: str
    spoiler_tag: bool = False


@dataclass
class CreateMessageParams:
    content: str = ""
    nonce: str | None = None
    tts: bool = False
    embed: Embed | None = None
    files: list[FileParams] = field(default_factory=list)

    # Transformation directives, never serialized
    spoiler_tag_content: bool = False
    spoiler_tag_all_attachments: bool = False

    @classmethod
    def from_string(cls, content: str) -> CreateMessageParams:
        return cls(content=content)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"content": self.content}
        if self.nonce:
            out["nonce"] = self.nonce
        if self.tts:
            out["tts"] = True
        if self.embed is not None:
            out["embed"] = self.embed.to_dict()
        return out


@dataclass
class EditMessageParams:
    """All fields optional; omitted ones leave the server copy unchanged."""
    content: str | None = None
    embed: Embed | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.content is not None:
            out["content"] = self.content
        if self.embed is not None:
            out["embed"] = self.embed.to_dict()
        return out


@dataclass(eq=False)
class BulkDeleteMessagesParams(Lockable):
    messages: list[Snowflake] = field(default_factory=list)

    @staticmethod
    def _too_many(count: int) -> None:
        if count > BULK_DELETE_MAX:
            raise TooManyMessagesError(f"must be {BULK_DELETE_MAX} or less messages to delete")

    @staticmethod
    def _too_few(count: int) -> None:
        if count < BULK_DELETE_MIN:
            raise TooFewMessagesError(f"must be at least {BULK_DELETE_MIN} messages to delete")

    def validate(self) -> None:
        with self.read_locked():
            count = len(self.messages)
        self._too_many(count)
        self._too_few(count)

    def add_message(self, message: Message) -> None:
        # Duplicates are kept; Discord counts them once.
        with message.read_locked():
            message_id = message.id
        if is_empty(message_id):
            raise MissingSnowflakeError("message is missing snowflake")
        with self.write_locked():
            self._too_many(len(self.messages) + 1)
            self.messages.append(message_id)

    def to_dict(self) -> dict[str, Any]:
        with self.read_locked():
            return {"messages": [str(m) for m in self.messages]}
