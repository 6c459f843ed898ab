"""Tests for cli/console.py — outcome reporting and exit codes."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from cli import console
from config.networks import LIMIT_ORDER_CONTRACT, SEPOLIA
from core.errors import ConfigurationError, OrderbookError, OrderbookErrorKind
from execution.balance_checker import CheckStatus
from execution.workflow import (
    UNSUPPORTED_NETWORK_WARNING,
    OrderRequest,
    WorkflowResult,
    WorkflowState,
)
from models.order import LimitOrder
from models.remediation import RemediationAction, RemediationKind
from web3_infra.eip712_signer import SignedOrder

MAKER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


def _approval() -> RemediationAction:
    return RemediationAction(
        kind=RemediationKind.APPROVE_TOKEN,
        network=SEPOLIA.name,
        chain_id=SEPOLIA.chain_id,
        rpc_url=SEPOLIA.rpc_url,
        token=SEPOLIA.token("WETH"),
        spender=LIMIT_ORDER_CONTRACT,
    )


class TestReportResult:

    def test_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        order = LimitOrder(
            salt=1,
            maker=MAKER,
            maker_asset=SEPOLIA.token("WETH").address,
            taker_asset=SEPOLIA.token("USDC").address,
            making_amount=1,
            taking_amount=1,
        )
        result = WorkflowResult(
            state=WorkflowState.SUCCEEDED,
            signed=SignedOrder(order=order, order_hash="0xabc", signature="0xdef"),
        )
        assert console.report_result(result, SEPOLIA) == console.EXIT_OK
        out = capsys.readouterr().out
        assert "0xabc" in out
        assert SEPOLIA.app_url() in out

    def test_aborted_writes_script(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        result = WorkflowResult(
            state=WorkflowState.ABORTED,
            check_status=CheckStatus.INSUFFICIENT_ALLOWANCE,
            remediation=_approval(),
        )
        assert console.report_result(result, SEPOLIA, tmp_path) == console.EXIT_ABORTED
        assert (tmp_path / "approve_weth.py").exists()
        assert "approve_weth.py" in capsys.readouterr().out

    def test_aborted_fund_native_writes_nothing(self, tmp_path: Path) -> None:
        result = WorkflowResult(
            state=WorkflowState.ABORTED,
            check_status=CheckStatus.INSUFFICIENT_NATIVE,
            remediation=RemediationAction(
                kind=RemediationKind.FUND_NATIVE,
                network=SEPOLIA.name,
                chain_id=SEPOLIA.chain_id,
                rpc_url=SEPOLIA.rpc_url,
                amount=10**15,
            ),
        )
        assert console.report_result(result, SEPOLIA, tmp_path) == console.EXIT_ABORTED
        assert list(tmp_path.iterdir()) == []

    def test_failed_prints_kind_and_warning(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        result = WorkflowResult(
            state=WorkflowState.FAILED,
            error=OrderbookError(OrderbookErrorKind.UNSUPPORTED_NETWORK, 404, body="Not Found"),
            warnings=[UNSUPPORTED_NETWORK_WARNING],
        )
        assert console.report_result(result, SEPOLIA, tmp_path) == console.EXIT_FAILED
        out = capsys.readouterr().out
        assert "UNSUPPORTED_NETWORK" in out
        assert UNSUPPORTED_NETWORK_WARNING in out
        assert list(tmp_path.iterdir()) == []

    def test_failed_allowance_writes_script(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        result = WorkflowResult(
            state=WorkflowState.FAILED,
            error=OrderbookError(OrderbookErrorKind.INSUFFICIENT_ALLOWANCE, 400, body="{}"),
            remediation=_approval(),
        )
        assert console.report_result(result, SEPOLIA, tmp_path) == console.EXIT_FAILED
        assert (tmp_path / "approve_weth.py").exists()
        out = capsys.readouterr().out
        assert "INSUFFICIENT_ALLOWANCE" in out
        assert "SUCCESS" not in out

    def test_success_without_signed_order(self, capsys: pytest.CaptureFixture[str]) -> None:
        result = WorkflowResult(state=WorkflowState.SUCCEEDED)
        assert console.report_result(result, SEPOLIA) == console.EXIT_OK
        assert "Order hash" not in capsys.readouterr().out


class TestReportException:

    def test_configuration_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        exc = ConfigurationError("USDC on sepolia reports 18 decimals, configured 6")
        assert console.report_exception(exc) == console.EXIT_FAILED
        assert "Configuration error: USDC" in capsys.readouterr().out

    def test_other_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert console.report_exception(TimeoutError("rpc timed out")) == console.EXIT_FAILED
        assert "TimeoutError: rpc timed out" in capsys.readouterr().out


class TestRequireSettings:

    def test_missing_exits(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("AUTH_KEY", raising=False)
        with pytest.raises(SystemExit) as exc_info:
            console.require_settings("AUTH_KEY")
        assert exc_info.value.code == console.EXIT_FAILED
        assert "Missing AUTH_KEY" in capsys.readouterr().out


class TestPrinting:

    def test_balance(self, capsys: pytest.CaptureFixture[str]) -> None:
        console.print_balance("USDC", 1_500_000, 6)
        assert "USDC: 1.5" in capsys.readouterr().out

    def test_order_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
        console.print_order_summary(
            OrderRequest(
                maker_token=SEPOLIA.token("WETH"),
                taker_token=SEPOLIA.token("USDC"),
                making_amount=Decimal("0.0001"),
                taking_amount=Decimal("0.1"),
            )
        )
        out = capsys.readouterr().out
        assert "Selling: 0.0001 WETH" in out
        assert "Rate: 1000 USDC per WETH" in out
