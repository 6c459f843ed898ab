"""Error taxonomy shared by the order-book client, the chain adapter and scripts.

Order-book failures carry a machine-checkable :class:`OrderbookErrorKind`
derived from the HTTP status and, for validation rejections, from a
structured error code in the response body.  Free-form message text is
never inspected.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any


class ConfigurationError(Exception):
    """Raised for missing secrets, unknown tokens or mismatched decimals."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = missing or []


class OrderbookErrorKind(str, Enum):
    """Classification of an order-book service failure."""

    INSUFFICIENT_ALLOWANCE = "INSUFFICIENT_ALLOWANCE"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    UNSUPPORTED_NETWORK = "UNSUPPORTED_NETWORK"
    UNAUTHORIZED = "UNAUTHORIZED"
    DUPLICATE_ORDER = "DUPLICATE_ORDER"
    INVALID_ORDER = "INVALID_ORDER"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    GENERIC = "GENERIC"


# Structured error codes, normalised to upper snake case.
_ERROR_CODES: dict[str, OrderbookErrorKind] = {
    "NOT_ENOUGH_ALLOWANCE": OrderbookErrorKind.INSUFFICIENT_ALLOWANCE,
    "INSUFFICIENT_ALLOWANCE": OrderbookErrorKind.INSUFFICIENT_ALLOWANCE,
    "ALLOWANCE_TOO_LOW": OrderbookErrorKind.INSUFFICIENT_ALLOWANCE,
    "NOT_ENOUGH_BALANCE": OrderbookErrorKind.INSUFFICIENT_BALANCE,
    "INSUFFICIENT_BALANCE": OrderbookErrorKind.INSUFFICIENT_BALANCE,
    "BALANCE_TOO_LOW": OrderbookErrorKind.INSUFFICIENT_BALANCE,
    "ORDER_ALREADY_EXISTS": OrderbookErrorKind.DUPLICATE_ORDER,
    "DUPLICATE_ORDER": OrderbookErrorKind.DUPLICATE_ORDER,
    "INVALID_SIGNATURE": OrderbookErrorKind.INVALID_ORDER,
    "INVALID_ORDER": OrderbookErrorKind.INVALID_ORDER,
    "ORDER_EXPIRED": OrderbookErrorKind.INVALID_ORDER,
}

_CODE_FIELDS = ("code", "errorCode", "error_code", "error")

# Identifier-like tokens only: "NotEnoughAllowance", "NOT_ENOUGH_ALLOWANCE".
_IDENTIFIER = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _normalise_code(raw: Any) -> str | None:
    if not isinstance(raw, str) or not _IDENTIFIER.match(raw):
        return None
    return _CAMEL_BOUNDARY.sub("_", raw).upper()


def extract_error_code(payload: Any) -> str | None:
    """Return the first structured error code found in a response payload."""
    if not isinstance(payload, dict):
        return None
    for field in _CODE_FIELDS:
        code = _normalise_code(payload.get(field))
        if code is not None and code in _ERROR_CODES:
            return code
    meta = payload.get("meta")
    if isinstance(meta, list):
        for entry in meta:
            if isinstance(entry, dict):
                code = _normalise_code(entry.get("type"))
                if code is not None and code in _ERROR_CODES:
                    return code
    return None


def classify_http_error(status_code: int, payload: Any = None) -> OrderbookErrorKind:
    """Map an HTTP failure to an :class:`OrderbookErrorKind`."""
    if status_code == 404:
        return OrderbookErrorKind.UNSUPPORTED_NETWORK
    if status_code in (401, 403):
        return OrderbookErrorKind.UNAUTHORIZED
    if status_code == 409:
        return OrderbookErrorKind.DUPLICATE_ORDER
    if status_code >= 500:
        return OrderbookErrorKind.SERVICE_UNAVAILABLE
    if status_code in (400, 422):
        code = extract_error_code(payload)
        if code is not None:
            return _ERROR_CODES[code]
    return OrderbookErrorKind.GENERIC


class OrderbookError(Exception):
    """Raised when the order-book service answers with a non-2xx status."""

    def __init__(
        self,
        kind: OrderbookErrorKind,
        status_code: int,
        body: str = "",
        payload: Any = None,
        url: str = "",
    ) -> None:
        super().__init__(f"HTTP {status_code}: {body}")
        self.kind = kind
        self.status_code = status_code
        self.body = body
        self.payload = payload
        self.url = url


class TransactionError(Exception):
    """Raised when an on-chain transaction reverts or is never confirmed."""

    def __init__(self, message: str, tx_hash: str | None = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash
