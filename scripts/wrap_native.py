#!/usr/bin/env python3
"""Wrap 0.001 ETH into WETH on Sepolia and print balances before/after.

Usage:
    python scripts/wrap_native.py
"""

from __future__ import annotations

import asyncio
import sys
from decimal import Decimal
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from eth_account import Account

from cli import console
from config.networks import SEPOLIA
from config.settings import Settings
from core.errors import TransactionError
from models.order import to_base_units
from web3_infra.erc20 import TokenClient, TokenClientConfig, make_web3

TOKEN = SEPOLIA.token("WETH")
AMOUNT = Decimal("0.001")


async def wrap(settings: Settings) -> int:
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

    before = await tokens.balance_of(TOKEN.address)
    console.print_balance(f"{TOKEN.symbol} (before)", before, TOKEN.decimals)

    print(f"\nWrapping {AMOUNT} {SEPOLIA.native_symbol}...")
    print("Waiting for confirmation...")
    try:
        result = await tokens.wrap_native(TOKEN.address, to_base_units(AMOUNT, 18))
    except TransactionError as exc:
        print(f"❌ Error: {exc} (tx {exc.tx_hash})")
        return console.EXIT_FAILED

    print(f"Transaction sent: {result.tx_hash}")
    print(f"✅ {SEPOLIA.native_symbol} wrapped successfully!")

    after = await tokens.balance_of(TOKEN.address)
    console.print_balance(f"{TOKEN.symbol} (after)", after, TOKEN.decimals)
    print("\nYou can now run: python scripts/sepolia_limit_order.py")
    return console.EXIT_OK


def main() -> int:
    console.banner(f"Wrap {SEPOLIA.native_symbol} → {TOKEN.symbol} on Sepolia")
    settings = console.require_settings("PRIVATE_KEY")
    return asyncio.run(wrap(settings))


if __name__ == "__main__":
    sys.exit(main())
