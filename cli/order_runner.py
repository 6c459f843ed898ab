"""Wires settings, chain access and the order-book client into one workflow run.

Shared by the ``scripts/*_limit_order.py`` entry points.
"""

from __future__ import annotations

import httpx
import structlog

from cli import console
from config.networks import NetworkConfig
from config.settings import Settings
from execution.balance_checker import BalanceAllowanceChecker
from execution.order_builder import OrderBuilder
from execution.workflow import LimitOrderWorkflow, OrderRequest
from orderbook.connector import HttpxConnector
from orderbook.rest_client import OrderbookClient
from web3_infra.eip712_signer import OrderSigner
from web3_infra.erc20 import TokenClient, TokenClientConfig, make_web3

logger = structlog.get_logger("cli.order_runner")


async def run_limit_order(
    settings: Settings,
    network: NetworkConfig,
    request: OrderRequest,
    auto_approve: bool = False,
    http_client: httpx.AsyncClient | None = None,
) -> int:
    """Run the workflow once and report it; returns the exit code.

    Errors raised before the workflow reaches a terminal state (RPC
    failures, a decimals mismatch) are reported as a failure banner.
    *http_client* replaces the connector's own client when given.
    """
    signer = OrderSigner(settings.PRIVATE_KEY, network.chain_id, network.limit_order_contract)
    console.print_wallet(signer.address, network)

    w3 = make_web3(network.rpc_url, settings.RPC_TIMEOUT_SECONDS)
    tokens = TokenClient(
        w3,
        owner=signer.address,
        private_key=settings.PRIVATE_KEY,
        config=TokenClientConfig(
            tx_confirmation_timeout_s=settings.TX_CONFIRMATION_TIMEOUT_SECONDS,
        ),
    )
    checker = BalanceAllowanceChecker(tokens, network)

    try:
        snapshot = await checker.snapshot(request.maker_token)
        console.print_balance(network.native_symbol, snapshot.native_balance, 18)
        console.print_balance(request.maker_token.symbol, snapshot.token_balance, request.maker_token.decimals)
        console.print_allowance(request.maker_token.symbol, snapshot.allowance)
        console.print_order_summary(request)

        async with HttpxConnector(timeout=settings.HTTP_TIMEOUT_SECONDS, client=http_client) as connector:
            workflow = LimitOrderWorkflow(
                network=network,
                checker=checker,
                builder=OrderBuilder(signer.address),
                signer=signer,
                client=OrderbookClient(
                    settings.AUTH_KEY,
                    network.chain_id,
                    connector,
                    base_url=settings.ORDERBOOK_BASE_URL,
                ),
                token_client=tokens,
                auto_approve=auto_approve,
            )
            console.stage("📤 Checking, signing and submitting...")
            result = await workflow.run(request)
    except Exception as exc:
        logger.error("order_runner.error", network=network.name, error=str(exc), exc_info=True)
        return console.report_exception(exc)

    if result.approval_tx:
        console.stage(f"🔓 Approval confirmed: {result.approval_tx}")
    logger.info(
        "order_runner.finished",
        state=result.state.value,
        history=[s.value for s in result.history],
    )
    return console.report_result(result, network, settings.REMEDIATION_DIR)
