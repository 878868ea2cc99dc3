"""Transport request/response types and capability protocols."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass
class Request:
    bucket: str
    endpoint: str
    body: bytes | None = None
    content_type: str = ""


@dataclass
class Response:
    status_code: int
    body: bytes = b""
    reason: str = ""

    @property
    def status(self) -> str:
        return f"{self.status_code} {self.reason}".strip()


# ---------------------------------------------------------------------------
# Capabilities: each operation asks only for the verb it uses
# ---------------------------------------------------------------------------

@runtime_checkable
class Getter(Protocol):
    async def get(self, request: Request) -> Response: ...


@runtime_checkable
class Poster(Protocol):
    async def post(self, request: Request) -> Response: ...


@runtime_checkable
class Patcher(Protocol):
    async def patch(self, request: Request) -> Response: ...


@runtime_checkable
class Deleter(Protocol):
    async def delete(self, request: Request) -> Response: ...


class Transport(ABC):
    """Rate-limited HTTP transport satisfying every capability."""

    @abstractmethod
    async def do(self, method: str, request: Request) -> Response: ...

    async def get(self, request: Request) -> Response:
        return await self.do("GET", request)

    async def post(self, request: Request) -> Response:
        return await self.do("POST", request)

    async def patch(self, request: Request) -> Response:
        return await self.do("PATCH", request)

    async def delete(self, request: Request) -> Response:
        return await self.do("DELETE", request)

    async def close(self) -> None:
        """Clean up resources. Override if needed."""
