"""Console narration for the entry-point scripts.

Scripts print a stage line per step and finish with a success/failure
banner; ``report_result`` also renders any remediation script.
"""

from __future__ import annotations

import sys
from pathlib import Path

from config.networks import NetworkConfig
from config.settings import Settings, load_settings
from core.errors import ConfigurationError
from core.logger import setup_logging
from execution.balance_checker import CheckStatus
from execution.remediation_script import write_script
from execution.workflow import OrderRequest, WorkflowResult, WorkflowState
from models.order import UINT256_MAX, from_base_units
from models.remediation import RemediationAction, RemediationKind

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ABORTED = 2


def require_settings(*names: str) -> Settings:
    """Load settings and configure logging, or exit(1) naming what is missing."""
    try:
        settings = load_settings(*names)
    except ConfigurationError as exc:
        for name in exc.missing:
            print(f"❌ Missing {name} in environment or .env")
        sys.exit(EXIT_FAILED)
    setup_logging(settings.LOG_LEVEL, settings.APP_ENV)
    return settings


def banner(title: str) -> None:
    print(f"═══ {title} ═══")


def section(title: str) -> None:
    print(f"\n─── {title} ───")


def stage(message: str) -> None:
    print(message)


def print_wallet(address: str, network: NetworkConfig) -> None:
    print(f"👛 Wallet: {address}")
    print(f"   Chain:  {network.name} ({network.chain_id})")


def print_balance(symbol: str, raw: int, decimals: int) -> None:
    print(f"💰 {symbol}: {format(from_base_units(raw, decimals).normalize(), 'f')}")


def print_allowance(symbol: str, raw: int) -> None:
    shown = "unlimited" if raw == UINT256_MAX else str(raw)
    print(f"🔓 {symbol} allowance for router: {shown}")


def print_order_summary(request: OrderRequest) -> None:
    rate = request.taking_amount / request.making_amount if request.making_amount else None
    print("\n📝 Order:")
    print(f"- Selling: {request.making_amount} {request.maker_token.symbol}")
    print(f"- For: {request.taking_amount} {request.taker_token.symbol}")
    if rate is not None:
        print(f"- Rate: {format(rate.normalize(), 'f')} {request.taker_token.symbol} per {request.maker_token.symbol}")
    print(f"- Expires in: {request.expires_in_seconds}s\n")


def emit_remediation(action: RemediationAction, directory: Path | str) -> Path | None:
    """Print the action and, where it can be scripted, write the script."""
    print(f"\n💡 {action.describe()}")
    if action.kind == RemediationKind.FUND_NATIVE:
        print(f"   Send {action.native_symbol} to this wallet from an exchange or a bridge.")
        return None
    path = write_script(action, directory)
    print(f"✅ Created {path}")
    print(f"Run: python {path}")
    return path


def report_result(
    result: WorkflowResult,
    network: NetworkConfig,
    remediation_dir: Path | str = ".",
) -> int:
    """Print the outcome of a workflow run and return the process exit code."""
    if result.state == WorkflowState.SUCCEEDED:
        print(f"\n🎉 SUCCESS! Your limit order is live on {network.name}!")
        if result.signed is not None:
            print(f"Order hash: {result.signed.order_hash}")
        print(f"\n📊 View your order:\n{network.app_url()}")
        return EXIT_OK

    if result.state == WorkflowState.ABORTED:
        reason = {
            CheckStatus.INSUFFICIENT_NATIVE: f"Not enough {network.native_symbol} for gas fees",
            CheckStatus.INSUFFICIENT_TOKEN: "Not enough of the token you are selling",
            CheckStatus.INSUFFICIENT_ALLOWANCE: "The limit order router is not approved to spend your token",
        }.get(result.check_status, "Pre-flight check failed")  # type: ignore[arg-type]
        print(f"\n❌ {reason}")
        if result.remediation is not None:
            emit_remediation(result.remediation, remediation_dir)
        return EXIT_ABORTED

    print(f"❌ Error: {result.error}")
    if result.error_kind is not None:
        print(f"   Kind: {result.error_kind.value}")
    for warning in result.warnings:
        print(f"\n⚠️  {warning}")
    if result.remediation is not None:
        emit_remediation(result.remediation, remediation_dir)
    return EXIT_FAILED


def report_exception(exc: Exception) -> int:
    """Failure banner for an error raised outside the workflow's own states."""
    if isinstance(exc, ConfigurationError):
        print(f"\n❌ Configuration error: {exc}")
    else:
        print(f"\n❌ Error: {type(exc).__name__}: {exc}")
    return EXIT_FAILED
