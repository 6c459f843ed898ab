#!/usr/bin/env python3
"""Sepolia WETH → USDC limit order that approves the router itself.

Same order as ``sepolia_limit_order.py``, but a missing allowance is
fixed on the spot: an approval transaction is sent and the script waits
for one confirmation before signing.

Usage:
    python scripts/approve_and_submit_sepolia.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from cli import console
from cli.order_runner import run_limit_order
from config.networks import SEPOLIA
from scripts.sepolia_limit_order import REQUEST


def main() -> int:
    console.banner("1inch Limit Order — Sepolia (auto-approve)")
    settings = console.require_settings("AUTH_KEY", "PRIVATE_KEY")
    return asyncio.run(run_limit_order(settings, SEPOLIA, REQUEST, auto_approve=True))


if __name__ == "__main__":
    sys.exit(main())
