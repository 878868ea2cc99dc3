"""Discord REST transport on httpx.

Requests carry their rate-limit bucket so a scheduler can group them; this
transport only records the bucket in its log context. It never retries.
"""

from __future__ import annotations

import httpx

from cordial.config import HTTPConfig
from cordial.errors import TransportError
from cordial.transports.base import Request, Response, Transport
from cordial.utils.logging import get_logger

log = get_logger(__name__)


class HTTPTransport(Transport):
    def __init__(
        self,
        config: HTTPConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        headers = {"User-Agent": config.user_agent}
        if config.token:
            headers["Authorization"] = f"Bot {config.token}"
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(base_url=config.api_url, timeout=config.timeout)
        client.headers.update(headers)
        self._client = client

    async def do(self, method: str, request: Request) -> Response:
        headers = {}
        if request.content_type:
            headers["Content-Type"] = request.content_type

        bound = log.bind(method=method, endpoint=request.endpoint, bucket=request.bucket)
        try:
            resp = await self._client.request(
                method,
                request.endpoint,
                content=request.body,
                headers=headers,
            )
        except httpx.HTTPError as e:
            bound.warning("http_request_failed", error=str(e))
            raise TransportError(f"{method} {request.endpoint} failed: {e}") from e

        response = Response(
            status_code=resp.status_code,
            body=resp.content,
            reason=resp.reason_phrase,
        )
        if resp.status_code >= 400:
            bound.warning("http_error_status", status=resp.status_code)
            raise TransportError(
                f"{method} {request.endpoint} returned {response.status}",
                status_code=resp.status_code,
                reason=resp.reason_phrase,
            )

        bound.debug("http_request_done", status=resp.status_code)
        return response

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
