#!/usr/bin/env python3
"""Introspect the order-book client and poke the live API on Sepolia.

Lists the client's public methods and URLs, fetches orders for the zero
address, then submits a deliberately bogus order to show how a
rejection is classified.  Nothing real is submitted.

Usage:
    python scripts/inspect_orderbook_api.py
"""

from __future__ import annotations

import asyncio
import inspect
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from cli import console
from config.networks import SEPOLIA
from config.settings import Settings
from core.errors import OrderbookError
from models.order import ZERO_ADDRESS
from orderbook.connector import HttpxConnector
from orderbook.rest_client import OrderbookClient

DUMMY_SUBMISSION = {
    "orderHash": "0x" + "00" * 32,
    "signature": "0x",
    "data": {
        "salt": "1",
        "maker": ZERO_ADDRESS,
        "receiver": ZERO_ADDRESS,
        "makerAsset": ZERO_ADDRESS,
        "takerAsset": ZERO_ADDRESS,
        "makingAmount": "1",
        "takingAmount": "1",
        "makerTraits": "0",
        "extension": "0x",
    },
}


async def inspect_api(settings: Settings) -> int:
    async with HttpxConnector(timeout=settings.HTTP_TIMEOUT_SECONDS) as connector:
        client = OrderbookClient(
            settings.AUTH_KEY,
            SEPOLIA.chain_id,
            connector,
            base_url=settings.ORDERBOOK_BASE_URL,
        )

        console.section("Client methods")
        for name, member in inspect.getmembers(client, predicate=inspect.ismethod):
            if not name.startswith("_"):
                print(f"- {name}{inspect.signature(member)}")

        console.section("URLs")
        print(f"Base URL: {client.base_url}")
        print(f"url('/test'): {client.url('/test')}")

        console.section("Orders for the zero address")
        try:
            orders = await client.get_orders_by_maker(ZERO_ADDRESS)
            print("Success! API is working")
            print(f"Orders: {orders}")
        except OrderbookError as exc:
            print(f"Error ({exc.kind.value}): {exc}")

        console.section("Submitting a dummy order (expected to fail)")
        try:
            await client.submit_raw(DUMMY_SUBMISSION)
            print("Unexpectedly accepted")
        except OrderbookError as exc:
            print(f"Submit error (expected): {exc}")
            print(f"Classified as: {exc.kind.value}")
    return console.EXIT_OK


def main() -> int:
    console.banner("Inspecting the 1inch order-book API")
    settings = console.require_settings("AUTH_KEY")
    return asyncio.run(inspect_api(settings))


if __name__ == "__main__":
    sys.exit(main())
