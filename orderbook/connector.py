"""HTTP connector capability used by the order-book client.

The client only needs two operations, ``fetch`` (GET) and ``send``
(POST JSON), so any HTTP stack can be plugged in.  ``HttpxConnector``
is the default implementation.
"""

from __future__ import annotations

import json
from typing import Any, Protocol, runtime_checkable

import httpx
import structlog

from core.errors import OrderbookError, classify_http_error

logger = structlog.get_logger("orderbook.connector")


@runtime_checkable
class HttpConnector(Protocol):
    """GET/POST capability returning parsed JSON or raising ``OrderbookError``."""

    async def fetch(self, url: str, headers: dict[str, str]) -> Any: ...

    async def send(self, url: str, body: Any, headers: dict[str, str]) -> Any: ...


class HttpxConnector:
    """``HttpConnector`` backed by ``httpx.AsyncClient``.

    Parameters
    ----------
    timeout:
        Request timeout in seconds.
    client:
        Pre-built client (tests pass one with ``httpx.MockTransport``).
        When omitted, one is created and owned by the connector.
    """

    def __init__(self, timeout: float = 15.0, client: httpx.AsyncClient | None = None) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def fetch(self, url: str, headers: dict[str, str]) -> Any:
        logger.debug("connector.get", url=url)
        response = await self._client.get(url, headers=headers)
        return self._handle(response)

    async def send(self, url: str, body: Any, headers: dict[str, str]) -> Any:
        logger.debug("connector.post", url=url)
        response = await self._client.post(
            url,
            json=body,
            headers={**headers, "Content-Type": "application/json"},
        )
        return self._handle(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ── Internals ────────────────────────────────────────────────

    @staticmethod
    def _parse(text: str) -> Any:
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text

    def _handle(self, response: httpx.Response) -> Any:
        payload = self._parse(response.text)
        if response.is_success:
            return payload

        kind = classify_http_error(response.status_code, payload)
        logger.warning(
            "connector.http_error",
            url=str(response.request.url),
            status=response.status_code,
            kind=kind.value,
        )
        raise OrderbookError(
            kind=kind,
            status_code=response.status_code,
            body=response.text,
            payload=payload if isinstance(payload, (dict, list)) else None,
            url=str(response.request.url),
        )

    # ── Context manager ──────────────────────────────────────────

    async def __aenter__(self) -> HttpxConnector:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()
