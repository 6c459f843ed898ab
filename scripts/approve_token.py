#!/usr/bin/env python3
"""Approve WETH for the limit order router on Sepolia (max uint256).

Returns early when an allowance already exists.

Usage:
    python scripts/approve_token.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from eth_account import Account

from cli import console
from config.networks import SEPOLIA
from config.settings import Settings
from core.errors import TransactionError
from web3_infra.erc20 import TokenClient, TokenClientConfig, make_web3

TOKEN = SEPOLIA.token("WETH")


async def approve(settings: Settings) -> int:
    owner = Account.from_key(settings.PRIVATE_KEY).address
    console.print_wallet(owner, SEPOLIA)

    tokens = TokenClient(
        make_web3(SEPOLIA.rpc_url, settings.RPC_TIMEOUT_SECONDS),
        owner=owner,
        private_key=settings.PRIVATE_KEY,
        config=TokenClientConfig(
            tx_confirmation_timeout_s=settings.TX_CONFIRMATION_TIMEOUT_SECONDS,
        ),
    )

    current = await tokens.allowance(TOKEN.address, SEPOLIA.limit_order_contract)
    print(f"Current allowance: {current}")
    if current > 0:
        print("✅ Already approved!")
        return console.EXIT_OK

    print(f"\nApproving {TOKEN.symbol} for {SEPOLIA.limit_order_contract}...")
    print("Waiting for confirmation...")
    try:
        result = await tokens.approve(TOKEN.address, SEPOLIA.limit_order_contract)
    except TransactionError as exc:
        print(f"❌ Error: {exc} (tx {exc.tx_hash})")
        return console.EXIT_FAILED

    print(f"TX: {result.tx_hash}")
    print("✅ Approved!\n")
    print("Now run: python scripts/sepolia_limit_order.py")
    return console.EXIT_OK


def main() -> int:
    console.banner(f"Approve {TOKEN.symbol} for 1inch trading")
    settings = console.require_settings("PRIVATE_KEY")
    return asyncio.run(approve(settings))


if __name__ == "__main__":
    sys.exit(main())
