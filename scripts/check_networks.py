#!/usr/bin/env python3
"""Probe which chains the 1inch order-book API serves.

GETs ``/orderbook/v4.0/<chainId>/`` for each known chain and prints
SUPPORTED / NOT SUPPORTED (status) / ERROR.

Usage:
    python scripts/check_networks.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import httpx

from cli import console
from config.networks import PROBE_NETWORKS
from config.settings import Settings
from orderbook.connector import HttpxConnector
from orderbook.rest_client import OrderbookClient


async def check_networks(settings: Settings) -> int:
    async with HttpxConnector(timeout=settings.HTTP_TIMEOUT_SECONDS) as connector:
        for name, chain_id in PROBE_NETWORKS:
            client = OrderbookClient(
                settings.AUTH_KEY,
                chain_id,
                connector,
                base_url=settings.ORDERBOOK_BASE_URL,
            )
            try:
                support = await client.probe_support()
            except httpx.HTTPError as exc:
                print(f"❌ {name} ({chain_id}): ERROR - {exc}")
                continue

            if support.supported:
                print(f"✅ {name} ({chain_id}): SUPPORTED")
            else:
                print(f"❌ {name} ({chain_id}): NOT SUPPORTED ({support.status_code})")

    print("\n💡 If Sepolia is not supported, you'll need to:")
    print("1. Use a mainnet (Ethereum, Polygon, etc.)")
    print("2. Get real tokens (small amounts for testing)")
    print("3. Pay real gas fees (use a cheap network like Polygon)")
    return console.EXIT_OK


def main() -> int:
    console.banner("Checking 1inch Limit Order support per network")
    settings = console.require_settings("AUTH_KEY")
    return asyncio.run(check_networks(settings))


if __name__ == "__main__":
    sys.exit(main())
