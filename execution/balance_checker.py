"""BalanceAllowanceChecker — pre-flight reads before an order is built.

Each check is one sequential RPC read against a ``TokenReader``
(``TokenClient`` in production, an ``AsyncMock`` in tests).  Shortfalls
come back as a ``CheckOutcome`` carrying a ``RemediationAction``; the
checker never sends transactions and never touches the file system.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import structlog

from config.networks import NetworkConfig, TokenInfo
from core.errors import ConfigurationError
from models.order import UINT256_MAX, to_base_units
from models.remediation import RemediationAction, RemediationKind

logger = structlog.get_logger("execution.balance_checker")

NATIVE_DECIMALS = 18


class TokenReader(Protocol):
    """Read side of ``TokenClient``."""

    async def native_balance(self) -> int: ...

    async def balance_of(self, token: str) -> int: ...

    async def allowance(self, token: str, spender: str) -> int: ...

    async def decimals(self, token: str) -> int: ...


class CheckStatus(str, Enum):
    """Result of a pre-flight check."""

    OK = "OK"
    INSUFFICIENT_NATIVE = "INSUFFICIENT_NATIVE"
    INSUFFICIENT_TOKEN = "INSUFFICIENT_TOKEN"
    INSUFFICIENT_ALLOWANCE = "INSUFFICIENT_ALLOWANCE"


@dataclass(frozen=True)
class BalanceSnapshot:
    """Native balance, token balance and router allowance, read in that order."""

    native_balance: int
    token_balance: int
    allowance: int


@dataclass(frozen=True)
class CheckOutcome:
    """Status plus whatever was read on the way (``None`` = not read)."""

    status: CheckStatus
    native_balance: int | None = None
    token_balance: int | None = None
    allowance: int | None = None
    remediation: RemediationAction | None = None

    @property
    def ok(self) -> bool:
        return self.status == CheckStatus.OK


class BalanceAllowanceChecker:
    """Pre-flight balance and allowance checks for one wallet on one network.

    Parameters
    ----------
    reader:
        Object exposing the ``TokenReader`` reads for the wallet.
    network:
        Network config; supplies the spender and the gas minimum.
    """

    def __init__(self, reader: TokenReader, network: NetworkConfig) -> None:
        self._reader = reader
        self._network = network

    @property
    def spender(self) -> str:
        return self._network.limit_order_contract

    async def snapshot(self, token: TokenInfo) -> BalanceSnapshot:
        """Read the wallet's current position for *token* without judging it."""
        native = await self._reader.native_balance()
        balance = await self._reader.balance_of(token.address)
        allowance = await self._reader.allowance(token.address, self.spender)
        return BalanceSnapshot(native_balance=native, token_balance=balance, allowance=allowance)

    # ── Individual checks ────────────────────────────────────────

    async def check_native(self) -> CheckOutcome:
        """Native gas-token balance against ``network.min_native_balance``."""
        balance = await self._reader.native_balance()
        minimum = to_base_units(self._network.min_native_balance, NATIVE_DECIMALS)
        logger.info(
            "balance_checker.native",
            network=self._network.name,
            balance_wei=balance,
            minimum_wei=minimum,
        )
        if balance < minimum:
            return CheckOutcome(
                status=CheckStatus.INSUFFICIENT_NATIVE,
                native_balance=balance,
                remediation=self._action(
                    RemediationKind.FUND_NATIVE,
                    amount=minimum,
                    reason=f"{self._network.native_symbol} balance below gas minimum",
                ),
            )
        return CheckOutcome(status=CheckStatus.OK, native_balance=balance)

    async def check_balance(self, token: TokenInfo, required: int) -> CheckOutcome:
        """Token balance against the amount the order will sell."""
        balance = await self._reader.balance_of(token.address)
        logger.info(
            "balance_checker.token",
            token=token.symbol,
            balance=balance,
            required=required,
        )
        if balance >= required:
            return CheckOutcome(status=CheckStatus.OK, token_balance=balance)

        remediation = None
        if token.is_wrapped_native:
            remediation = self._action(
                RemediationKind.WRAP_NATIVE,
                token=token,
                amount=required - balance,
                reason=f"{token.symbol} balance below order size",
            )
        return CheckOutcome(
            status=CheckStatus.INSUFFICIENT_TOKEN,
            token_balance=balance,
            remediation=remediation,
        )

    async def check_allowance(self, token: TokenInfo, required: int) -> CheckOutcome:
        """Allowance granted to the router against the order size."""
        allowance = await self._reader.allowance(token.address, self.spender)
        logger.info(
            "balance_checker.allowance",
            token=token.symbol,
            spender=self.spender,
            allowance=allowance,
            required=required,
        )
        if allowance >= required:
            return CheckOutcome(status=CheckStatus.OK, allowance=allowance)
        return CheckOutcome(
            status=CheckStatus.INSUFFICIENT_ALLOWANCE,
            allowance=allowance,
            remediation=self.approval_action(token, required),
        )

    async def check(self, token: TokenInfo, required: int) -> CheckOutcome:
        """Native, then token balance, then allowance; first failure wins."""
        native = await self.check_native()
        if not native.ok:
            return native

        balance = await self.check_balance(token, required)
        if not balance.ok:
            return CheckOutcome(
                status=balance.status,
                native_balance=native.native_balance,
                token_balance=balance.token_balance,
                remediation=balance.remediation,
            )

        allowance = await self.check_allowance(token, required)
        return CheckOutcome(
            status=allowance.status,
            native_balance=native.native_balance,
            token_balance=balance.token_balance,
            allowance=allowance.allowance,
            remediation=allowance.remediation,
        )

    async def verify_decimals(self, token: TokenInfo) -> None:
        """Compare on-chain ``decimals()`` with the configured value.

        Raises
        ------
        ConfigurationError
            If they differ; amounts would be scaled wrongly otherwise.
        """
        onchain = await self._reader.decimals(token.address)
        if onchain != token.decimals:
            raise ConfigurationError(
                f"{token.symbol} on {self._network.name} reports {onchain} decimals, "
                f"configured {token.decimals}"
            )

    # ── Helpers ──────────────────────────────────────────────────

    def approval_action(self, token: TokenInfo, required: int | None = None) -> RemediationAction:
        """Unlimited approval for the router; *required* is the allowance the order needs."""
        return self._action(
            RemediationKind.APPROVE_TOKEN,
            token=token,
            spender=self.spender,
            amount=UINT256_MAX,
            required=required,
            reason=f"{token.symbol} allowance for the limit order router is too low",
        )

    def _action(
        self,
        kind: RemediationKind,
        token: TokenInfo | None = None,
        spender: str | None = None,
        amount: int | None = None,
        required: int | None = None,
        reason: str = "",
    ) -> RemediationAction:
        return RemediationAction(
            kind=kind,
            network=self._network.name,
            chain_id=self._network.chain_id,
            rpc_url=self._network.rpc_url,
            native_symbol=self._network.native_symbol,
            token=token,
            spender=spender,
            amount=amount,
            required=required,
            reason=reason,
        )
