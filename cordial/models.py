"""Wire models owned by a Message: users, attachments, embeds, reactions."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any

from cordial.errors import DecodeError
from cordial.snowflake import Snowflake

ATTACHMENT_SPOILER_PREFIX = "SPOILER_"


class MessageType(IntEnum):
    DEFAULT = 0
    RECIPIENT_ADD = 1
    RECIPIENT_REMOVE = 2
    CALL = 3
    CHANNEL_NAME_CHANGE = 4
    CHANNEL_ICON_CHANGE = 5
    CHANNEL_PINNED_MESSAGE = 6
    GUILD_MEMBER_JOIN = 7


class MessageActivityType(IntEnum):
    JOIN = 1
    SPECTATE = 2
    LISTEN = 3
    JOIN_REQUEST = 5


# ---------------------------------------------------------------------------
# Decoding helpers
# ---------------------------------------------------------------------------

def require_dict(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def list_of(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"{key} must be a JSON array")
    return value


def string_field(data: dict[str, Any], key: str, what: str) -> str:
    """A string member that may be absent or null, in which case it is empty."""
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"{what} {key} must be a string, got {type(value).__name__}")
    return value


def parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise DecodeError(f"invalid timestamp: {value!r}")
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise DecodeError(f"invalid timestamp: {value!r}") from e


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


class _DeepCopyMixin:
    def deep_copy(self):
        return copy.deepcopy(self)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@dataclass
class User(_DeepCopyMixin):
    id: Snowflake
    username: str = ""
    discriminator: str = ""
    avatar: str | None = None
    bot: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> User:
        data = require_dict(data, "user")
        if "id" not in data:
            raise DecodeError("user is missing id")
        return cls(
            id=Snowflake.parse(data["id"]),
            username=string_field(data, "username", "user"),
            discriminator=string_field(data, "discriminator", "user"),
            avatar=data.get("avatar"),
            bot=bool(data.get("bot", False)),
        )


# ---------------------------------------------------------------------------
# Attachments
# ---------------------------------------------------------------------------

@dataclass
class Attachment(_DeepCopyMixin):
    id: Snowflake
    filename: str
    size: int = 0
    url: str = ""
    proxy_url: str = ""
    height: int | None = None
    width: int | None = None

    @property
    def spoiler_tag(self) -> bool:
        return self.filename.startswith(ATTACHMENT_SPOILER_PREFIX)

    @classmethod
    def from_dict(cls, data: Any) -> Attachment:
        data = require_dict(data, "attachment")
        if "id" not in data:
            raise DecodeError("attachment is missing id")
        return cls(
            id=Snowflake.parse(data["id"]),
            filename=string_field(data, "filename", "attachment"),
            size=int(data.get("size") or 0),
            url=string_field(data, "url", "attachment"),
            proxy_url=string_field(data, "proxy_url", "attachment"),
            height=data.get("height"),
            width=data.get("width"),
        )


# ---------------------------------------------------------------------------
# Embeds
# ---------------------------------------------------------------------------

@dataclass
class EmbedFooter:
    text: str
    icon_url: str | None = None
    proxy_icon_url: str | None = None


@dataclass
class EmbedMedia:
    """Image, thumbnail, and video all share this shape."""
    url: str | None = None
    proxy_url: str | None = None
    height: int | None = None
    width: int | None = None


@dataclass
class EmbedProvider:
    name: str | None = None
    url: str | None = None


@dataclass
class EmbedAuthor:
    name: str | None = None
    url: str | None = None
    icon_url: str | None = None
    proxy_icon_url: str | None = None


@dataclass
class EmbedField:
    name: str
    value: str
    inline: bool = False


def _sub(cls: type, data: Any, what: str) -> Any:
    if data is None:
        return None
    data = require_dict(data, what)
    try:
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
    except TypeError as e:
        raise DecodeError(f"invalid {what}: {e}") from e


@dataclass
class Embed(_DeepCopyMixin):
    title: str | None = None
    type: str | None = None
    description: str | None = None
    url: str | None = None
    timestamp: datetime | None = None
    color: int | None = None
    footer: EmbedFooter | None = None
    image: EmbedMedia | None = None
    thumbnail: EmbedMedia | None = None
    video: EmbedMedia | None = None
    provider: EmbedProvider | None = None
    author: EmbedAuthor | None = None
    fields: list[EmbedField] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Embed:
        data = require_dict(data, "embed")
        return cls(
            title=data.get("title"),
            type=data.get("type"),
            description=data.get("description"),
            url=data.get("url"),
            timestamp=parse_timestamp(data.get("timestamp")),
            color=data.get("color"),
            footer=_sub(EmbedFooter, data.get("footer"), "embed footer"),
            image=_sub(EmbedMedia, data.get("image"), "embed image"),
            thumbnail=_sub(EmbedMedia, data.get("thumbnail"), "embed thumbnail"),
            video=_sub(EmbedMedia, data.get("video"), "embed video"),
            provider=_sub(EmbedProvider, data.get("provider"), "embed provider"),
            author=_sub(EmbedAuthor, data.get("author"), "embed author"),
            fields=[
                _sub(EmbedField, require_dict(f, "embed field"), "embed field")
                for f in list_of(data, "fields")
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "title": self.title,
            "type": self.type,
            "description": self.description,
            "url": self.url,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "color": self.color,
        }
        for name in ("footer", "image", "thumbnail", "video", "provider", "author"):
            sub = getattr(self, name)
            if sub is not None:
                out[name] = _drop_none(vars(sub))
        if self.fields:
            out["fields"] = [vars(f).copy() for f in self.fields]
        return _drop_none(out)


# ---------------------------------------------------------------------------
# Reactions
# ---------------------------------------------------------------------------

@dataclass
class Emoji:
    name: str | None
    id: Snowflake | None = None
    animated: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> Emoji:
        data = require_dict(data, "emoji")
        return cls(
            name=data.get("name"),
            id=Snowflake.parse_optional(data.get("id")),
            animated=bool(data.get("animated", False)),
        )


@dataclass
class Reaction(_DeepCopyMixin):
    count: int
    me: bool
    emoji: Emoji

    @classmethod
    def from_dict(cls, data: Any) -> Reaction:
        data = require_dict(data, "reaction")
        return cls(
            count=int(data.get("count") or 0),
            me=bool(data.get("me", False)),
            emoji=Emoji.from_dict(data.get("emoji") or {}),
        )


# ---------------------------------------------------------------------------
# Rich presence descriptors
# ---------------------------------------------------------------------------

@dataclass
class MessageActivity:
    type: int
    party_id: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> MessageActivity:
        data = require_dict(data, "message activity")
        return cls(type=int(data.get("type") or 0), party_id=data.get("party_id") or "")


@dataclass
class MessageApplication:
    id: Snowflake
    cover_image: str = ""
    description: str = ""
    icon: str = ""
    name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> MessageApplication:
        data = require_dict(data, "message application")
        return cls(
            id=Snowflake.parse(data.get("id")),
            cover_image=data.get("cover_image") or "",
            description=data.get("description") or "",
            icon=data.get("icon") or "",
            name=data.get("name") or "",
        )
