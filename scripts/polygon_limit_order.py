#!/usr/bin/env python3
"""Place a WMATIC → USDC limit order on Polygon mainnet.

⚠️  Uses REAL funds (fees are low).  Sells 0.1 WMATIC for 0.05 USDC,
expiring after 5 minutes.  Needs at least 0.1 MATIC for gas; without
WMATIC it writes ``wrap_wmatic.py``, without allowance ``approve_wmatic.py``.

Usage:
    python scripts/polygon_limit_order.py
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
from config.networks import POLYGON
from execution.workflow import OrderRequest

# WMATIC has 18 decimals, USDC 6; each amount is scaled by its own token
REQUEST = OrderRequest(
    maker_token=POLYGON.token("WMATIC"),
    taker_token=POLYGON.token("USDC"),
    making_amount=Decimal("0.1"),
    taking_amount=Decimal("0.05"),
    expires_in_seconds=300,
)


def main() -> int:
    console.banner("1inch Limit Order — Polygon Mainnet")
    print("⚠️  This uses REAL funds on Polygon (but fees are very low)\n")
    settings = console.require_settings("AUTH_KEY", "PRIVATE_KEY")
    return asyncio.run(run_limit_order(settings, POLYGON, REQUEST))


if __name__ == "__main__":
    sys.exit(main())
