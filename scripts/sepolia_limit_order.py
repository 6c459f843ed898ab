#!/usr/bin/env python3
"""Place a small WETH → USDC limit order on Sepolia.

Sells 0.0001 WETH for 0.1 USDC; the order expires after 2 minutes.
If the router has no WETH allowance, writes ``approve_weth.py`` instead.

Usage:
    python scripts/sepolia_limit_order.py

Environment variables:
    AUTH_KEY     - Order-book API bearer token
    PRIVATE_KEY  - Maker wallet private key
"""

from __future__ import annotations

import asyncio
import sys
from decimal import Decimal
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from cli import console
from cli.order_runner import run_limit_order
from config.networks import SEPOLIA
from execution.workflow import OrderRequest

REQUEST = OrderRequest(
    maker_token=SEPOLIA.token("WETH"),
    taker_token=SEPOLIA.token("USDC"),
    making_amount=Decimal("0.0001"),
    taking_amount=Decimal("0.1"),
    expires_in_seconds=120,
)


def main() -> int:
    console.banner("1inch Limit Order — Sepolia")
    settings = console.require_settings("AUTH_KEY", "PRIVATE_KEY")
    return asyncio.run(run_limit_order(settings, SEPOLIA, REQUEST))


if __name__ == "__main__":
    sys.exit(main())
