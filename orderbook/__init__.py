"""limit-order-lab — order-book service client."""

from .connector import HttpConnector, HttpxConnector
from .rest_client import NetworkSupport, OrderbookClient

__all__ = [
    "HttpConnector",
    "HttpxConnector",
    "NetworkSupport",
    "OrderbookClient",
]
