"""OrderbookClient — REST client for the 1inch order-book service (v4.0).

Wraps an injected ``HttpConnector`` for:
- Order submission (``POST /``)
- Orders by maker, order by hash, order count (GETs)
- Network support probe (``GET /``)

Every request carries ``Authorization: Bearer <AUTH_KEY>``.  Nothing is
retried: a rejected submission surfaces as ``OrderbookError`` with a
typed ``kind``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import structlog

from core.errors import OrderbookError, OrderbookErrorKind
from orderbook.connector import HttpConnector
from web3_infra.eip712_signer import SignedOrder

logger = structlog.get_logger("orderbook.rest_client")

# Default 1inch order-book endpoint; chain id is appended per client
_DEFAULT_BASE_URL = "https://api.1inch.dev/orderbook/v4.0"


@dataclass(frozen=True)
class NetworkSupport:
    """Outcome of probing the order-book root for one chain."""

    chain_id: int
    supported: bool
    status_code: int | None = None
    error: str | None = None


class OrderbookClient:
    """Async client for one chain's order book.

    Parameters
    ----------
    auth_key:
        Bearer token for the service.
    chain_id:
        Chain id; part of every URL.
    connector:
        Object implementing ``fetch`` / ``send``.
    base_url:
        Versioned service root without the chain id.
    """

    def __init__(
        self,
        auth_key: str,
        chain_id: int,
        connector: HttpConnector,
        base_url: str = _DEFAULT_BASE_URL,
    ) -> None:
        self._auth_key = auth_key
        self._chain_id = chain_id
        self._connector = connector
        self._base_url = f"{base_url.rstrip('/')}/{chain_id}"

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def chain_id(self) -> int:
        return self._chain_id

    def url(self, path: str = "/") -> str:
        """Absolute URL for *path* under this chain's root."""
        return f"{self._base_url}/{path.lstrip('/')}"

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._auth_key}"}

    # ── Submission ───────────────────────────────────────────────

    async def submit_order(self, signed: SignedOrder) -> Any:
        """POST a signed order; returns the service acknowledgement.

        Raises
        ------
        OrderbookError
            On any non-2xx response.  Duplicate submissions are not
            suppressed; the service decides.
        """
        body = {
            "orderHash": signed.order_hash,
            "signature": signed.signature,
            "data": signed.order.to_api_data(),
        }
        logger.info(
            "orderbook.submit_order",
            chain_id=self._chain_id,
            order_hash=signed.order_hash,
        )
        result = await self._connector.send(self.url("/"), body, self.headers())
        logger.info("orderbook.order_submitted", order_hash=signed.order_hash)
        return result

    async def submit_raw(self, payload: dict[str, Any]) -> Any:
        """POST an arbitrary body to the submission endpoint (diagnostics)."""
        return await self._connector.send(self.url("/"), payload, self.headers())

    # ── Reads ────────────────────────────────────────────────────

    async def get_orders_by_maker(
        self,
        maker: str,
        page: int = 1,
        limit: int = 100,
        statuses: list[int] | None = None,
    ) -> Any:
        """Orders created by *maker*, paginated."""
        query: dict[str, Any] = {"page": page, "limit": limit}
        if statuses:
            query["statuses"] = ",".join(str(s) for s in statuses)
        return await self._connector.fetch(
            self.url(f"/address/{maker}?{urlencode(query)}"),
            self.headers(),
        )

    async def get_order_by_hash(self, order_hash: str) -> Any:
        return await self._connector.fetch(self.url(f"/order/{order_hash}"), self.headers())

    async def get_orders_count(self, statuses: list[int] | None = None) -> Any:
        path = "/count"
        if statuses:
            path += "?" + urlencode({"statuses": ",".join(str(s) for s in statuses)})
        return await self._connector.fetch(self.url(path), self.headers())

    async def probe_support(self) -> NetworkSupport:
        """GET the chain root: 2xx = supported, 404 = unsupported."""
        try:
            await self._connector.fetch(self.url("/"), self.headers())
        except OrderbookError as exc:
            logger.info(
                "orderbook.probe",
                chain_id=self._chain_id,
                supported=False,
                status=exc.status_code,
            )
            return NetworkSupport(
                chain_id=self._chain_id,
                supported=False,
                status_code=exc.status_code,
                error=None if exc.kind == OrderbookErrorKind.UNSUPPORTED_NETWORK else exc.kind.value,
            )
        logger.info("orderbook.probe", chain_id=self._chain_id, supported=True)
        return NetworkSupport(chain_id=self._chain_id, supported=True)
