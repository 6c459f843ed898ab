"""LimitOrderWorkflow — check, build, sign and submit one limit order.

State machine per run::

    INIT → CHECK_BALANCE → {ABORTED | CHECK_ALLOWANCE}
         → {ABORTED (+remediation) | [auto-approve] | BUILD_ORDER}
         → SIGN_ORDER → SUBMIT_ORDER → {SUCCEEDED | FAILED}

No state is revisited and nothing is retried.  Follow-up actions come
back as ``RemediationAction`` values on the result; rendering them is
the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

import structlog

from config.networks import NetworkConfig, TokenInfo
from core.errors import OrderbookError, OrderbookErrorKind, TransactionError
from execution.balance_checker import BalanceAllowanceChecker, CheckStatus
from execution.order_builder import DEFAULT_EXPIRATION_SECONDS, OrderBuilder
from models.order import UINT256_MAX, LimitOrder
from models.remediation import RemediationAction
from orderbook.rest_client import OrderbookClient
from web3_infra.eip712_signer import OrderSigner, SignedOrder
from web3_infra.erc20 import TokenClient

logger = structlog.get_logger("execution.workflow")


class WorkflowState(str, Enum):
    """Stages of a single workflow run."""

    INIT = "INIT"
    CHECK_BALANCE = "CHECK_BALANCE"
    CHECK_ALLOWANCE = "CHECK_ALLOWANCE"
    BUILD_ORDER = "BUILD_ORDER"
    SIGN_ORDER = "SIGN_ORDER"
    SUBMIT_ORDER = "SUBMIT_ORDER"
    ABORTED = "ABORTED"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


TERMINAL_STATES = frozenset(
    {WorkflowState.ABORTED, WorkflowState.SUCCEEDED, WorkflowState.FAILED}
)

UNSUPPORTED_NETWORK_WARNING = (
    "The order-book API does not appear to support this network; "
    "try Ethereum mainnet or another supported chain"
)


@dataclass(frozen=True)
class OrderRequest:
    """Sell ``making_amount`` of ``maker_token`` for ``taking_amount`` of ``taker_token``.

    Amounts are human quantities; each is scaled by its own token's decimals.
    """

    maker_token: TokenInfo
    taker_token: TokenInfo
    making_amount: Decimal
    taking_amount: Decimal
    expires_in_seconds: int = DEFAULT_EXPIRATION_SECONDS


@dataclass
class WorkflowResult:
    """Everything a caller needs to report one run."""

    state: WorkflowState = WorkflowState.INIT
    order: LimitOrder | None = None
    signed: SignedOrder | None = None
    response: Any = None
    remediation: RemediationAction | None = None
    error: Exception | None = None
    check_status: CheckStatus | None = None
    approval_tx: str | None = None
    warnings: list[str] = field(default_factory=list)
    history: list[WorkflowState] = field(default_factory=lambda: [WorkflowState.INIT])

    @property
    def succeeded(self) -> bool:
        return self.state == WorkflowState.SUCCEEDED

    @property
    def error_kind(self) -> OrderbookErrorKind | None:
        if isinstance(self.error, OrderbookError):
            return self.error.kind
        return None


class InvalidTransition(RuntimeError):
    """Raised if the workflow tries to revisit a state or leave a terminal one."""


class LimitOrderWorkflow:
    """Sequences checker → builder → signer → client for one network.

    Parameters
    ----------
    network:
        Network config (spender, chain id).
    checker:
        Pre-flight balance / allowance checker.
    builder:
        Order builder for the maker.
    signer:
        EIP-712 signer; its address must be the builder's maker.
    client:
        Order-book client for ``network.chain_id``.
    token_client:
        Needed only with ``auto_approve``.
    auto_approve:
        Send an approval transaction (and wait for one confirmation)
        instead of aborting when the allowance is short.
    verify_decimals:
        Compare on-chain ``decimals()`` with the configured tokens first.
    """

    def __init__(
        self,
        network: NetworkConfig,
        checker: BalanceAllowanceChecker,
        builder: OrderBuilder,
        signer: OrderSigner,
        client: OrderbookClient,
        token_client: TokenClient | None = None,
        auto_approve: bool = False,
        verify_decimals: bool = True,
    ) -> None:
        if auto_approve and token_client is None:
            raise ValueError("auto_approve requires a token_client")
        self._network = network
        self._checker = checker
        self._builder = builder
        self._signer = signer
        self._client = client
        self._token_client = token_client
        self._auto_approve = auto_approve
        self._verify_decimals = verify_decimals

    async def run(self, request: OrderRequest) -> WorkflowResult:
        """Execute one run; always returns a result in a terminal state.

        ``ConfigurationError`` (decimals mismatch) and signing errors
        propagate unchanged.
        """
        result = WorkflowResult()
        log = logger.bind(network=self._network.name, chain_id=self._network.chain_id)

        making, taking = self._builder.amounts_for(
            request.maker_token,
            request.making_amount,
            request.taker_token,
            request.taking_amount,
        )

        # ── Balances ────────────────────────────────────────────
        self._transition(result, WorkflowState.CHECK_BALANCE, log)
        if self._verify_decimals:
            await self._checker.verify_decimals(request.maker_token)
            await self._checker.verify_decimals(request.taker_token)

        native = await self._checker.check_native()
        if not native.ok:
            return self._abort(result, native.status, native.remediation, log)

        balance = await self._checker.check_balance(request.maker_token, making)
        if not balance.ok:
            return self._abort(result, balance.status, balance.remediation, log)

        # ── Allowance ───────────────────────────────────────────
        self._transition(result, WorkflowState.CHECK_ALLOWANCE, log)
        allowance = await self._checker.check_allowance(request.maker_token, making)
        if not allowance.ok:
            if not self._auto_approve:
                return self._abort(result, allowance.status, allowance.remediation, log)
            try:
                tx = await self._token_client.approve(  # type: ignore[union-attr]
                    request.maker_token.address,
                    self._network.limit_order_contract,
                    UINT256_MAX,
                )
            except TransactionError as exc:
                result.error = exc
                result.check_status = allowance.status
                self._transition(result, WorkflowState.FAILED, log)
                return result
            result.approval_tx = tx.tx_hash
            log.info("workflow.approved", token=request.maker_token.symbol, tx_hash=tx.tx_hash)
        result.check_status = CheckStatus.OK

        # ── Build / sign ────────────────────────────────────────
        self._transition(result, WorkflowState.BUILD_ORDER, log)
        result.order = self._builder.build(
            maker_asset=request.maker_token.address,
            taker_asset=request.taker_token.address,
            making_amount=making,
            taking_amount=taking,
            expires_in_seconds=request.expires_in_seconds,
        )

        self._transition(result, WorkflowState.SIGN_ORDER, log)
        result.signed = await self._signer.asign_order(result.order)

        # ── Submit ──────────────────────────────────────────────
        self._transition(result, WorkflowState.SUBMIT_ORDER, log)
        try:
            result.response = await self._client.submit_order(result.signed)
        except OrderbookError as exc:
            self._transition(result, WorkflowState.FAILED, log)
            await self._handle_submit_error(result, exc, request.maker_token, making, log)
            return result

        self._transition(result, WorkflowState.SUCCEEDED, log)
        return result

    # ── Internals ────────────────────────────────────────────────

    async def _handle_submit_error(
        self,
        result: WorkflowResult,
        exc: OrderbookError,
        maker_token: TokenInfo,
        making: int,
        log: Any,
    ) -> None:
        result.error = exc
        if exc.kind == OrderbookErrorKind.UNSUPPORTED_NETWORK:
            result.warnings.append(UNSUPPORTED_NETWORK_WARNING)
            return

        if exc.kind == OrderbookErrorKind.INSUFFICIENT_ALLOWANCE:
            result.remediation = self._checker.approval_action(maker_token, making)
            return

        if exc.kind in (OrderbookErrorKind.GENERIC, OrderbookErrorKind.INVALID_ORDER) and exc.status_code == 400:
            # unstructured rejection: confirm against chain state rather than the message text
            try:
                recheck = await self._checker.check_allowance(maker_token, making)
            except Exception as read_exc:
                log.warning("workflow.allowance_recheck_failed", error=str(read_exc))
                result.warnings.append(f"Could not re-read the allowance after the rejection: {read_exc}")
                return
            if not recheck.ok:
                result.remediation = recheck.remediation

    def _abort(
        self,
        result: WorkflowResult,
        status: CheckStatus,
        remediation: RemediationAction | None,
        log: Any,
    ) -> WorkflowResult:
        result.check_status = status
        result.remediation = remediation
        self._transition(result, WorkflowState.ABORTED, log)
        return result

    @staticmethod
    def _transition(result: WorkflowResult, state: WorkflowState, log: Any) -> None:
        if result.state in TERMINAL_STATES:
            raise InvalidTransition(f"cannot leave terminal state {result.state.value}")
        if state in result.history:
            raise InvalidTransition(f"state {state.value} already visited")
        log.info("workflow.transition", from_state=result.state.value, to_state=state.value)
        result.state = state
        result.history.append(state)
