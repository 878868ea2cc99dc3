"""Snowflake identifiers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from cordial.errors import DecodeError

DISCORD_EPOCH_MS = 1420070400000

_MAX = 2**64
_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Snowflake(int):
    """64-bit identifier assigned by Discord. Serialized as a decimal string."""

    def __new__(cls, value: int | str) -> Snowflake:
        number = int(value)
        if not 0 <= number < _MAX:
            raise ValueError(f"snowflake out of range: {number}")
        return super().__new__(cls, number)

    def __str__(self) -> str:
        return int.__repr__(self)

    def __repr__(self) -> str:
        return f"Snowflake({int.__repr__(self)})"

    @classmethod
    def parse(cls, value: Any) -> Snowflake:
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise DecodeError(f"invalid snowflake: {value!r}")
        try:
            return cls(value)
        except ValueError as e:
            raise DecodeError(f"invalid snowflake: {value!r}") from e

    @classmethod
    def parse_optional(cls, value: Any) -> Snowflake | None:
        if value is None or value == "":
            return None
        return cls.parse(value)

    @property
    def created_at(self) -> datetime:
        ms = (int(self) >> 22) + DISCORD_EPOCH_MS
        return _UNIX_EPOCH + timedelta(milliseconds=ms)


def is_empty(value: int | None) -> bool:
    """None and zero both mean "not assigned"."""
    return value is None or int(value) == 0
