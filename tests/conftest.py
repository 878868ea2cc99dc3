"""Shared fixtures: an in-memory transport and wire-format message builders."""

from __future__ import annotations

import json
from typing import Any

import pytest

from cordial.transports.base import Request, Response, Transport


class FakeTransport(Transport):
    """Records every request and answers from a queue of canned responses."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Request]] = []
        self.responses: list[Response | Exception] = []

    def queue(self, status_code: int = 200, body: Any = None, reason: str = "OK") -> None:
        raw = b"" if body is None else json.dumps(body).encode()
        self.responses.append(Response(status_code=status_code, body=raw, reason=reason))

    def queue_error(self, error: Exception) -> None:
        self.responses.append(error)

    async def do(self, method: str, request: Request) -> Response:
        self.calls.append((method, request))
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class GetOnly:
    """Exposes only the GET capability."""

    def __init__(self, transport: FakeTransport) -> None:
        self._transport = transport

    async def get(self, request: Request) -> Response:
        return await self._transport.get(request)


def message_payload(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": "111",
        "channel_id": "222",
        "author": {"id": "333", "username": "kim", "discriminator": "0001", "avatar": None},
        "content": "hello",
        "timestamp": "2018-06-10T14:32:00.123000+00:00",
        "edited_timestamp": None,
        "tts": False,
        "mention_everyone": False,
        "mentions": [],
        "mention_roles": [],
        "attachments": [],
        "embeds": [],
        "pinned": False,
        "type": 0,
    }
    data.update(overrides)
    return data


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def payload():
    return message_payload


@pytest.fixture
def get_only(transport):
    return GetOnly(transport)
