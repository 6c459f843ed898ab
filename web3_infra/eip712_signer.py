"""OrderSigner — EIP-712 signing of v4 limit orders with ``eth_account``.

The domain is the 1inch Aggregation Router v6 deployment for the given
chain.  Typed-data encoding and secp256k1 signing are delegated to
``eth_account``; nothing here reimplements the hashing rules.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import structlog
from eth_account import Account
from eth_account.messages import SignableMessage, encode_typed_data
from web3 import Web3

from config.networks import LIMIT_ORDER_CONTRACT
from models.order import LimitOrder

logger = structlog.get_logger("web3_infra.eip712_signer")

DOMAIN_NAME = "1inch Aggregation Router"
DOMAIN_VERSION = "6"

EIP712_DOMAIN_TYPES = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

ORDER_TYPES = [
    {"name": "salt", "type": "uint256"},
    {"name": "maker", "type": "address"},
    {"name": "receiver", "type": "address"},
    {"name": "makerAsset", "type": "address"},
    {"name": "takerAsset", "type": "address"},
    {"name": "makingAmount", "type": "uint256"},
    {"name": "takingAmount", "type": "uint256"},
    {"name": "makerTraits", "type": "uint256"},
]


@dataclass(frozen=True)
class SignedOrder:
    """Result of signing an order with EIP-712."""

    order: LimitOrder
    order_hash: str
    signature: str


# ── Typed-data helpers ──────────────────────────────────────────────


def limit_order_domain(
    chain_id: int,
    verifying_contract: str = LIMIT_ORDER_CONTRACT,
) -> dict[str, Any]:
    """EIP-712 domain of the limit order protocol on *chain_id*."""
    return {
        "name": DOMAIN_NAME,
        "version": DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": Web3.to_checksum_address(verifying_contract),
    }


def build_typed_data(
    order: LimitOrder,
    chain_id: int,
    verifying_contract: str = LIMIT_ORDER_CONTRACT,
) -> dict[str, Any]:
    """Full EIP-712 payload (``types``, ``primaryType``, ``domain``, ``message``)."""
    return {
        "types": {
            "EIP712Domain": EIP712_DOMAIN_TYPES,
            "Order": ORDER_TYPES,
        },
        "primaryType": "Order",
        "domain": limit_order_domain(chain_id, verifying_contract),
        "message": order.to_typed_message(),
    }


def _signable(
    order: LimitOrder,
    chain_id: int,
    verifying_contract: str = LIMIT_ORDER_CONTRACT,
) -> SignableMessage:
    return encode_typed_data(full_message=build_typed_data(order, chain_id, verifying_contract))


def order_hash(
    order: LimitOrder,
    chain_id: int,
    verifying_contract: str = LIMIT_ORDER_CONTRACT,
) -> str:
    """0x-prefixed EIP-712 digest: keccak256(0x19 ‖ 0x01 ‖ domainSeparator ‖ structHash)."""
    msg = _signable(order, chain_id, verifying_contract)
    digest = Web3.keccak(b"\x19" + msg.version + msg.header + msg.body)
    return Web3.to_hex(digest)


def recover_signer(
    order: LimitOrder,
    chain_id: int,
    signature: str,
    verifying_contract: str = LIMIT_ORDER_CONTRACT,
) -> str:
    """Recover the checksummed address that produced *signature*."""
    return Account.recover_message(
        _signable(order, chain_id, verifying_contract),
        signature=signature,
    )


def verify_signature(
    order: LimitOrder,
    chain_id: int,
    signature: str,
    expected_signer: str,
    verifying_contract: str = LIMIT_ORDER_CONTRACT,
) -> bool:
    """True if *signature* over *order* was produced by *expected_signer*."""
    recovered = recover_signer(order, chain_id, signature, verifying_contract)
    return recovered == Web3.to_checksum_address(expected_signer)


# ── Signer class ────────────────────────────────────────────────────


class OrderSigner:
    """Signs limit orders for one chain with a local private key.

    Parameters
    ----------
    private_key:
        Hex-encoded private key (``0x`` prefix optional).
    chain_id:
        Chain whose router deployment forms the EIP-712 domain.
    verifying_contract:
        Override for the router address (forks, non-standard deployments).
    """

    def __init__(
        self,
        private_key: str,
        chain_id: int,
        verifying_contract: str = LIMIT_ORDER_CONTRACT,
    ) -> None:
        # eth_account raises on a malformed key; let it propagate
        self._account = Account.from_key(private_key)
        self._chain_id = chain_id
        self._verifying_contract = Web3.to_checksum_address(verifying_contract)

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def chain_id(self) -> int:
        return self._chain_id

    def sign_order(self, order: LimitOrder) -> SignedOrder:
        """Sign *order* and return its hash and 65-byte signature.

        Raises
        ------
        ValueError
            If the order's maker is not this signer's address.
        """
        if order.maker != self.address:
            raise ValueError(
                f"order maker {order.maker} does not match signer {self.address}"
            )

        signable = _signable(order, self._chain_id, self._verifying_contract)
        signed = self._account.sign_message(signable)
        result = SignedOrder(
            order=order,
            order_hash=order_hash(order, self._chain_id, self._verifying_contract),
            signature=Web3.to_hex(signed.signature),
        )

        logger.debug(
            "eip712_signer.signed",
            order_hash=result.order_hash,
            chain_id=self._chain_id,
        )
        return result

    async def asign_order(self, order: LimitOrder) -> SignedOrder:
        """Sign in the default executor so the event loop is not blocked."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.sign_order, order)
