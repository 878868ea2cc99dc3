"""The Message entity: local mirror of a Discord channel message."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from cordial.core.lockable import Lockable, read_then_write
from cordial.errors import DecodeError, MissingSnowflakeError, UnsupportedTypeError
from cordial.models import (
    Attachment,
    Embed,
    MessageActivity,
    MessageApplication,
    MessageType,
    Reaction,
    User,
    list_of,
    parse_timestamp,
    require_dict,
    string_field,
)
from cordial.params import CreateMessageParams, EditMessageParams
from cordial.snowflake import Snowflake, is_empty
from cordial.utils.logging import get_logger

log = get_logger(__name__)

_SPOILER_MARK = "||"


def derive_spoiler_flags(content: str, attachments: list[Attachment]) -> tuple[bool, bool]:
    """Return (content is spoiler-wrapped, every attachment is a spoiler).

    Content counts only when it is long enough to hold both markers.
    An empty attachment list is never "all spoilers".
    """
    tagged_content = (
        len(content) >= 2 * len(_SPOILER_MARK)
        and content.startswith(_SPOILER_MARK)
        and content.endswith(_SPOILER_MARK)
    )
    tagged_attachments = bool(attachments) and all(a.spoiler_tag for a in attachments)
    return tagged_content, tagged_attachments


def _message_type(value: Any) -> MessageType | int:
    value = int(value or 0)
    try:
        return MessageType(value)
    except ValueError:
        # Newer types Discord added since; keep the raw discriminant
        return value


def _nonce(value: Any) -> str | None:
    # Discord echoes the nonce back as either an integer or a string
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise DecodeError(f"nonce must be a string or integer, got {type(value).__name__}")
    return str(value)


# ---------------------------------------------------------------------------
# Capabilities the entity needs from a client
# ---------------------------------------------------------------------------

class MessageSender(Protocol):
    async def create_channel_message(
        self, channel_id: Snowflake, params: CreateMessageParams
    ) -> Message: ...


class MessageUpdater(Protocol):
    async def edit_message(
        self, channel_id: Snowflake, message_id: Snowflake, params: EditMessageParams
    ) -> Message: ...


class MessageDeleter(Protocol):
    async def delete_message(self, channel_id: Snowflake, message_id: Snowflake) -> None: ...


class MessageSaver(MessageSender, MessageUpdater, Protocol):
    pass


# ---------------------------------------------------------------------------
# Entity
# ---------------------------------------------------------------------------

@dataclass
class Message(Lockable):
    """A channel message.

    ``id`` is None until Discord has persisted the message. Every instance
    owns its collections outright; copies never share them. Readers take the
    shared lock, multi-field writers the exclusive one, and neither is ever
    held across a network call.
    """

    channel_id: Snowflake | None = None
    id: Snowflake | None = None
    author: User | None = None
    content: str = ""
    timestamp: datetime | None = None
    edited_timestamp: datetime | None = None
    tts: bool = False
    mention_everyone: bool = False
    mentions: list[User] = field(default_factory=list)
    mention_roles: list[Snowflake] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)
    embeds: list[Embed] = field(default_factory=list)
    reactions: list[Reaction] = field(default_factory=list)
    nonce: str | None = None
    pinned: bool = False
    webhook_id: Snowflake | None = None
    type: MessageType | int = MessageType.DEFAULT
    activity: MessageActivity | None = None
    application: MessageApplication | None = None

    # Derived from content/attachments, never sent or received
    spoiler_tag_content: bool = field(default=False, init=False)
    spoiler_tag_all_attachments: bool = field(default=False, init=False)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Any) -> Message:
        data = require_dict(data, "message")
        if data.get("channel_id") in (None, ""):
            raise DecodeError("message is missing channel_id")
        try:
            message = cls(
                id=Snowflake.parse_optional(data.get("id")),
                channel_id=Snowflake.parse(data["channel_id"]),
                author=User.from_dict(data["author"]) if data.get("author") else None,
                content=string_field(data, "content", "message"),
                timestamp=parse_timestamp(data.get("timestamp")),
                edited_timestamp=parse_timestamp(data.get("edited_timestamp")),
                tts=bool(data.get("tts", False)),
                mention_everyone=bool(data.get("mention_everyone", False)),
                mentions=[User.from_dict(u) for u in list_of(data, "mentions")],
                mention_roles=[Snowflake.parse(r) for r in list_of(data, "mention_roles")],
                attachments=[Attachment.from_dict(a) for a in list_of(data, "attachments")],
                embeds=[Embed.from_dict(e) for e in list_of(data, "embeds")],
                reactions=[Reaction.from_dict(r) for r in list_of(data, "reactions")],
                nonce=_nonce(data.get("nonce")),
                pinned=bool(data.get("pinned", False)),
                webhook_id=Snowflake.parse_optional(data.get("webhook_id")),
                type=_message_type(data.get("type")),
                activity=MessageActivity.from_dict(data["activity"]) if data.get("activity") else None,
                application=(
                    MessageApplication.from_dict(data["application"]) if data.get("application") else None
                ),
            )
            message._derive()
        except (TypeError, ValueError, AttributeError) as e:
            raise DecodeError(f"invalid message: {e}") from e
        return message

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def _derive(self) -> None:
        self.spoiler_tag_content, self.spoiler_tag_all_attachments = derive_spoiler_flags(
            self.content, self.attachments
        )

    def update_internals(self) -> None:
        """Recompute the spoiler flags from current content and attachments."""
        with self.write_locked():
            self._derive()

    # ------------------------------------------------------------------
    # Copying
    # ------------------------------------------------------------------

    def deep_copy(self) -> Message:
        message = Message()
        self.copy_over_to(message)
        return message

    def copy_over_to(self, other: Any) -> None:
        """Overwrite *other* with a consistent snapshot of this message.

        The source is read-locked and the target write-locked for the whole
        copy. Every owned sub-entity is copied, nothing is aliased.
        """
        if not isinstance(other, Message):
            raise UnsupportedTypeError(
                f"argument given is not a Message: {type(other).__name__}"
            )
        if other is self:
            return

        with read_then_write(self, other):
            other.id = self.id
            other.channel_id = self.channel_id
            other.author = self.author.deep_copy() if self.author is not None else None
            other.content = self.content
            other.timestamp = self.timestamp
            other.edited_timestamp = self.edited_timestamp
            other.tts = self.tts
            other.mention_everyone = self.mention_everyone
            other.mentions = [u.deep_copy() for u in self.mentions]
            other.mention_roles = list(self.mention_roles)
            other.attachments = [a.deep_copy() for a in self.attachments]
            other.embeds = [e.deep_copy() for e in self.embeds]
            other.reactions = [r.deep_copy() for r in self.reactions]
            if self.nonce:
                other.nonce = self.nonce
            other.pinned = self.pinned
            other.webhook_id = self.webhook_id
            other.type = self.type
            other.activity = copy.deepcopy(self.activity)
            other.application = copy.deepcopy(self.application)
            other._derive()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def send(self, client: MessageSender) -> Message:
        """Create this message on Discord, then adopt the server's copy."""
        with self.read_locked():
            channel_id = self.channel_id
            params = CreateMessageParams(
                content=self.content,
                nonce=self.nonce,
                tts=self.tts,
                embed=self.embeds[0].deep_copy() if self.embeds else None,
            )

        message = await client.create_channel_message(channel_id, params)
        message.copy_over_to(self)
        return message

    async def update(self, client: MessageUpdater) -> Message:
        """Push local content/embed edits to Discord, then adopt the result."""
        with self.read_locked():
            channel_id = self.channel_id
            message_id = self.id
            params = EditMessageParams(
                content=self.content,
                embed=self.embeds[0].deep_copy() if self.embeds else None,
            )
        if is_empty(message_id):
            raise MissingSnowflakeError("message is missing snowflake")

        message = await client.edit_message(channel_id, message_id, params)
        message.copy_over_to(self)
        return message

    async def save(self, client: MessageSaver) -> Message:
        with self.read_locked():
            persisted = not is_empty(self.id)
        log.debug("message_save", persisted=persisted)
        if persisted:
            return await self.update(client)
        return await self.send(client)

    async def delete(self, client: MessageDeleter) -> None:
        # The local copy is stale afterwards; it is not cleared.
        with self.read_locked():
            channel_id = self.channel_id
            message_id = self.id
        if is_empty(message_id):
            raise MissingSnowflakeError("message is missing snowflake")
        await client.delete_message(channel_id, message_id)

    async def respond(self, client: MessageSender, reply: Message) -> Message:
        """Send *reply* into this message's channel."""
        with self.read_locked():
            channel_id = self.channel_id
        with reply.write_locked():
            reply.channel_id = channel_id
        return await reply.send(client)

    async def respond_string(self, client: MessageSender, content: str) -> Message:
        with self.read_locked():
            channel_id = self.channel_id
        return await client.create_channel_message(
            channel_id, CreateMessageParams.from_string(content)
        )
