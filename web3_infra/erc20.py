"""TokenClient — ERC-20 reads and approve/wrap transactions over ``AsyncWeb3``.

Provides async methods for:
- ``native_balance()`` / ``balance_of()`` / ``allowance()`` / ``decimals()``
- ``approve()`` — set an ERC-20 allowance for a spender
- ``wrap_native()`` — ``deposit()`` native gas token into its wrapped ERC-20

Write operations sign locally with the owner's key, broadcast, and block
until one receipt arrives (bounded by the configured timeout).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

import structlog
from web3 import AsyncWeb3
from web3.exceptions import TimeExhausted
from web3.providers import AsyncHTTPProvider
from web3.types import TxReceipt

from core.errors import TransactionError
from core.logger import redact_url
from models.order import UINT256_MAX

logger = structlog.get_logger("web3_infra.erc20")

# ── ABI fragments ───────────────────────────────────────────────────

ERC20_ABI = [
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
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
    {
        "name": "decimals",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
    },
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
]

# WETH9-style deposit, shared by WETH / WMATIC
WRAPPED_NATIVE_ABI = [
    *ERC20_ABI,
    {
        "name": "deposit",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [],
        "outputs": [],
    },
]


class TxStatus(str, Enum):
    """Transaction outcome."""

    CONFIRMED = "CONFIRMED"
    REVERTED = "REVERTED"


@dataclass(frozen=True)
class TxResult:
    """Result of a confirmed on-chain transaction."""

    tx_hash: str
    status: TxStatus
    gas_used: int
    block_number: int


@dataclass
class TokenClientConfig:
    """Gas and confirmation settings for write operations."""

    gas_limit_approve: int = 100_000
    gas_limit_wrap: int = 100_000
    gas_price_multiplier: Decimal = Decimal("1.2")  # 20% buffer over node estimate

    # Receipt wait; the wait is blocking for the caller
    tx_confirmation_timeout_s: float = 300.0


def make_web3(rpc_url: str, timeout_s: float = 30.0) -> AsyncWeb3:
    """Build an ``AsyncWeb3`` bound to a single HTTP endpoint."""
    provider = AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": timeout_s})
    logger.debug("erc20.web3_created", rpc=redact_url(rpc_url))
    return AsyncWeb3(provider)


class TokenClient:
    """ERC-20 adapter for one owner address.

    Usage::

        w3 = make_web3("https://sepolia.drpc.org")
        tokens = TokenClient(w3, owner=address, private_key=key)
        allowance = await tokens.allowance(weth_address, spender)
        if allowance == 0:
            await tokens.approve(weth_address, spender)

    Parameters
    ----------
    w3:
        Async Web3 instance.
    owner:
        Address whose balances are read and which sends transactions.
    private_key:
        Required only for ``approve`` / ``wrap_native``.
    config:
        Gas and confirmation settings.
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        owner: str,
        private_key: str | None = None,
        config: TokenClientConfig | None = None,
    ) -> None:
        self._w3 = w3
        self._owner = AsyncWeb3.to_checksum_address(owner)
        self._private_key = private_key
        self._config = config or TokenClientConfig()

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def config(self) -> TokenClientConfig:
        return self._config

    # ── Reads ────────────────────────────────────────────────────

    async def native_balance(self) -> int:
        """Native gas-token balance in wei."""
        return await self._w3.eth.get_balance(self._owner)

    async def balance_of(self, token: str) -> int:
        return await self._erc20(token).functions.balanceOf(self._owner).call()

    async def allowance(self, token: str, spender: str) -> int:
        return await self._erc20(token).functions.allowance(
            self._owner,
            AsyncWeb3.to_checksum_address(spender),
        ).call()

    async def decimals(self, token: str) -> int:
        return await self._erc20(token).functions.decimals().call()

    # ── Writes ───────────────────────────────────────────────────

    async def approve(
        self,
        token: str,
        spender: str,
        amount: int = UINT256_MAX,
    ) -> TxResult:
        """Approve *spender* for *amount* (default: max uint256).

        Raises
        ------
        TransactionError
            If the transaction reverts or no receipt arrives in time.
        """
        logger.info(
            "erc20.approve",
            token=token,
            spender=spender,
            unlimited=amount == UINT256_MAX,
        )
        tx = await self._erc20(token).functions.approve(
            AsyncWeb3.to_checksum_address(spender),
            amount,
        ).build_transaction(
            await self._base_tx_params(self._config.gas_limit_approve)
        )
        return await self._sign_and_send(tx)

    async def wrap_native(self, token: str, amount_wei: int) -> TxResult:
        """Deposit *amount_wei* of the native token into the wrapped token."""
        if amount_wei <= 0:
            raise ValueError(f"amount_wei must be positive, got {amount_wei}")

        logger.info("erc20.wrap_native", token=token, amount_wei=amount_wei)
        contract = self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(token),
            abi=WRAPPED_NATIVE_ABI,
        )
        params = await self._base_tx_params(self._config.gas_limit_wrap)
        params["value"] = amount_wei
        tx = await contract.functions.deposit().build_transaction(params)
        return await self._sign_and_send(tx)

    # ── Internals ────────────────────────────────────────────────

    def _erc20(self, token: str) -> Any:
        return self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(token),
            abi=ERC20_ABI,
        )

    async def _base_tx_params(self, gas_limit: int) -> dict[str, Any]:
        """Build base transaction parameters."""
        nonce = await self._w3.eth.get_transaction_count(self._owner)
        gas_price = await self._w3.eth.gas_price
        chain_id = await self._w3.eth.chain_id
        adjusted_gas_price = int(
            gas_price * int(self._config.gas_price_multiplier * 100) // 100
        )

        return {
            "from": self._owner,
            "nonce": nonce,
            "gas": gas_limit,
            "gasPrice": adjusted_gas_price,
            "chainId": chain_id,
        }

    async def _sign_and_send(self, tx: dict[str, Any]) -> TxResult:
        """Sign a transaction, broadcast it, and wait for one confirmation.

        Raises
        ------
        TransactionError
            If the transaction reverts or the receipt wait times out.
        """
        if not self._private_key:
            raise TransactionError("TokenClient has no private key; cannot send transactions")

        signed = self._w3.eth.account.sign_transaction(tx, self._private_key)
        tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash_hex = AsyncWeb3.to_hex(tx_hash)

        logger.info("erc20.tx_sent", tx_hash=tx_hash_hex)

        try:
            receipt: TxReceipt = await self._w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self._config.tx_confirmation_timeout_s,
            )
        except TimeExhausted as exc:
            logger.error("erc20.tx_timeout", tx_hash=tx_hash_hex, error=str(exc))
            raise TransactionError(
                f"Transaction not confirmed within {self._config.tx_confirmation_timeout_s}s",
                tx_hash=tx_hash_hex,
            ) from exc

        status = TxStatus.CONFIRMED if receipt.get("status", 0) == 1 else TxStatus.REVERTED
        result = TxResult(
            tx_hash=tx_hash_hex,
            status=status,
            gas_used=receipt.get("gasUsed", 0),
            block_number=receipt.get("blockNumber", 0),
        )

        if status == TxStatus.REVERTED:
            logger.error("erc20.tx_reverted", tx_hash=tx_hash_hex, gas_used=result.gas_used)
            raise TransactionError("Transaction reverted on-chain", tx_hash=tx_hash_hex)

        logger.info(
            "erc20.tx_confirmed",
            tx_hash=tx_hash_hex,
            gas_used=result.gas_used,
            block=result.block_number,
        )
        return result
