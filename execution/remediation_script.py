"""Render a ``RemediationAction`` into a standalone Python script.

The generated script depends only on ``web3`` and reads ``PRIVATE_KEY``
from the environment, so it can be run on its own.
"""

from __future__ import annotations

import json
from pathlib import Path
from string import Template

import structlog

from models.order import UINT256_MAX
from models.remediation import RemediationAction, RemediationKind

logger = structlog.get_logger("execution.remediation_script")

_ONE_NATIVE = 10**18

_APPROVE_ABI = [
    {
        "name": "approve",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "name": "allowance",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "spender", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]

_WRAP_ABI = [
    {
        "name": "deposit",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [],
        "outputs": [],
    },
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]

_HEADER = Template('''\
#!/usr/bin/env python3
"""$title

Generated by limit-order-lab for $network (chain $chain_id).
Reads PRIVATE_KEY from the environment.

Usage:
    python $filename
"""
import os
import sys

from web3 import Web3

RPC_URL = "$rpc_url"
CHAIN_ID = $chain_id
TOKEN = Web3.to_checksum_address("$token")
''')

_APPROVE_BODY = Template('''\
SPENDER = Web3.to_checksum_address("$spender")
AMOUNT = $amount
REQUIRED = $required

ABI = $abi


def main() -> int:
    key = os.getenv("PRIVATE_KEY")
    if not key:
        print("ERROR: PRIVATE_KEY not set")
        return 1

    w3 = Web3(Web3.HTTPProvider(RPC_URL))
    account = w3.eth.account.from_key(key)
    token = w3.eth.contract(address=TOKEN, abi=ABI)

    current = token.functions.allowance(account.address, SPENDER).call()
    print(f"Current allowance: {current}")
    if current >= REQUIRED:
        print("Already approved!")
        return 0

    print("Approving $symbol...")
    tx = token.functions.approve(SPENDER, AMOUNT).build_transaction({
        "from": account.address,
        "nonce": w3.eth.get_transaction_count(account.address),
        "chainId": CHAIN_ID,
    })
    signed = account.sign_transaction(tx)
    tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
    print(f"TX: {Web3.to_hex(tx_hash)}")
    receipt = w3.eth.wait_for_transaction_receipt(tx_hash)
    if receipt["status"] != 1:
        print("Approval reverted")
        return 1
    print("Approved!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
''')

_WRAP_BODY = Template('''\
AMOUNT_WEI = $amount

ABI = $abi


def main() -> int:
    key = os.getenv("PRIVATE_KEY")
    if not key:
        print("ERROR: PRIVATE_KEY not set")
        return 1

    w3 = Web3(Web3.HTTPProvider(RPC_URL))
    account = w3.eth.account.from_key(key)
    token = w3.eth.contract(address=TOKEN, abi=ABI)

    print(f"Wrapping {Web3.from_wei(AMOUNT_WEI, 'ether')} $native_symbol into $symbol...")
    tx = token.functions.deposit().build_transaction({
        "from": account.address,
        "value": AMOUNT_WEI,
        "nonce": w3.eth.get_transaction_count(account.address),
        "chainId": CHAIN_ID,
    })
    signed = account.sign_transaction(tx)
    tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
    print(f"TX: {Web3.to_hex(tx_hash)}")
    receipt = w3.eth.wait_for_transaction_receipt(tx_hash)
    if receipt["status"] != 1:
        print("Wrap reverted")
        return 1
    balance = token.functions.balanceOf(account.address).call()
    print(f"Wrapped! $symbol balance: {Web3.from_wei(balance, 'ether')}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
''')


def render_script(action: RemediationAction) -> str:
    """Return the source of a script performing *action*.

    Raises
    ------
    ValueError
        For ``FUND_NATIVE`` (needs an external transfer) or when the
        action lacks the token / spender it needs.
    """
    if action.kind == RemediationKind.FUND_NATIVE:
        raise ValueError("FUND_NATIVE cannot be scripted; send gas tokens to the wallet")
    if action.token is None:
        raise ValueError(f"{action.kind.value} requires a token")

    symbol = action.token.symbol
    common = {
        "network": action.network,
        "chain_id": action.chain_id,
        "rpc_url": action.rpc_url,
        "token": action.token.address,
        "filename": action.script_name(),
    }

    if action.kind == RemediationKind.APPROVE_TOKEN:
        if action.spender is None:
            raise ValueError("APPROVE_TOKEN requires a spender")
        header = _HEADER.substitute(common, title=f"Approve {symbol} for the limit order router.")
        amount = action.amount if action.amount is not None else UINT256_MAX
        body = _APPROVE_BODY.substitute(
            spender=action.spender,
            amount=hex(amount),
            required=action.required if action.required is not None else hex(amount),
            abi=json.dumps(_APPROVE_ABI, indent=4),
            symbol=symbol,
        )
    else:
        header = _HEADER.substitute(
            common,
            title=f"Wrap {action.native_symbol} into {symbol}.",
        )
        body = _WRAP_BODY.substitute(
            amount=action.amount or _ONE_NATIVE,
            abi=json.dumps(_WRAP_ABI, indent=4),
            symbol=symbol,
            native_symbol=action.native_symbol,
        )
    return header + "\n" + body


def write_script(action: RemediationAction, directory: Path | str = ".") -> Path:
    """Render *action* and write it to ``directory / action.script_name()``."""
    path = Path(directory) / action.script_name()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_script(action), encoding="utf-8")
    logger.info("remediation_script.written", path=str(path), kind=action.kind.value)
    return path
