"""Tests for execution/balance_checker.py."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from config.networks import LIMIT_ORDER_CONTRACT, POLYGON, SEPOLIA
from core.errors import ConfigurationError
from execution.balance_checker import BalanceAllowanceChecker, CheckStatus
from models.order import UINT256_MAX
from models.remediation import RemediationKind

WETH = SEPOLIA.token("WETH")
USDC = SEPOLIA.token("USDC")
ORDER_SIZE = 100_000_000_000_000  # 0.0001 WETH


def _reader(
    native: int = 10**18,
    balance: int = 10**18,
    allowance: int = UINT256_MAX,
    decimals: dict[str, int] | None = None,
) -> AsyncMock:
    reader = AsyncMock()
    reader.native_balance.return_value = native
    reader.balance_of.return_value = balance
    reader.allowance.return_value = allowance
    table = decimals or {WETH.address: 18, USDC.address: 6}
    reader.decimals.side_effect = lambda address: table[address]
    return reader


class TestSnapshot:

    @pytest.mark.asyncio
    async def test_reads_all_three(self) -> None:
        reader = _reader(native=3, balance=2, allowance=1)
        snap = await BalanceAllowanceChecker(reader, SEPOLIA).snapshot(WETH)
        assert (snap.native_balance, snap.token_balance, snap.allowance) == (3, 2, 1)
        reader.allowance.assert_awaited_once_with(WETH.address, LIMIT_ORDER_CONTRACT)


class TestCheckNative:

    @pytest.mark.asyncio
    async def test_enough(self) -> None:
        checker = BalanceAllowanceChecker(_reader(native=10**15), SEPOLIA)
        outcome = await checker.check_native()
        assert outcome.ok
        assert outcome.native_balance == 10**15

    @pytest.mark.asyncio
    async def test_below_minimum(self) -> None:
        checker = BalanceAllowanceChecker(_reader(native=10**15 - 1), SEPOLIA)
        outcome = await checker.check_native()
        assert outcome.status == CheckStatus.INSUFFICIENT_NATIVE
        assert outcome.remediation is not None
        assert outcome.remediation.kind == RemediationKind.FUND_NATIVE
        assert outcome.remediation.amount == 10**15
        assert outcome.remediation.native_symbol == "ETH"

    @pytest.mark.asyncio
    async def test_polygon_minimum(self) -> None:
        checker = BalanceAllowanceChecker(_reader(native=5 * 10**16), POLYGON)
        outcome = await checker.check_native()
        assert outcome.status == CheckStatus.INSUFFICIENT_NATIVE
        assert outcome.remediation is not None
        assert outcome.remediation.native_symbol == "MATIC"
        assert outcome.remediation.chain_id == 137


class TestCheckBalance:

    @pytest.mark.asyncio
    async def test_enough(self) -> None:
        reader = _reader(balance=ORDER_SIZE)
        outcome = await BalanceAllowanceChecker(reader, SEPOLIA).check_balance(WETH, ORDER_SIZE)
        assert outcome.ok
        reader.balance_of.assert_awaited_once_with(WETH.address)

    @pytest.mark.asyncio
    async def test_wrapped_native_shortfall(self) -> None:
        checker = BalanceAllowanceChecker(_reader(balance=ORDER_SIZE // 4), SEPOLIA)
        outcome = await checker.check_balance(WETH, ORDER_SIZE)
        assert outcome.status == CheckStatus.INSUFFICIENT_TOKEN
        assert outcome.remediation is not None
        assert outcome.remediation.kind == RemediationKind.WRAP_NATIVE
        assert outcome.remediation.amount == ORDER_SIZE - ORDER_SIZE // 4
        assert outcome.remediation.token == WETH

    @pytest.mark.asyncio
    async def test_plain_token_shortfall(self) -> None:
        checker = BalanceAllowanceChecker(_reader(balance=0), SEPOLIA)
        outcome = await checker.check_balance(USDC, 100_000)
        assert outcome.status == CheckStatus.INSUFFICIENT_TOKEN
        assert outcome.remediation is None


class TestCheckAllowance:

    @pytest.mark.asyncio
    async def test_zero_allowance(self) -> None:
        reader = _reader(allowance=0)
        checker = BalanceAllowanceChecker(reader, SEPOLIA)
        outcome = await checker.check_allowance(WETH, ORDER_SIZE)

        assert outcome.status == CheckStatus.INSUFFICIENT_ALLOWANCE
        assert outcome.allowance == 0
        action = outcome.remediation
        assert action is not None
        assert action.kind == RemediationKind.APPROVE_TOKEN
        assert action.spender == LIMIT_ORDER_CONTRACT
        assert action.amount == UINT256_MAX
        assert action.required == ORDER_SIZE
        assert action.script_name() == "approve_weth.py"
        reader.allowance.assert_awaited_once_with(WETH.address, LIMIT_ORDER_CONTRACT)

    @pytest.mark.asyncio
    async def test_exact_allowance_is_enough(self) -> None:
        checker = BalanceAllowanceChecker(_reader(allowance=ORDER_SIZE), SEPOLIA)
        assert (await checker.check_allowance(WETH, ORDER_SIZE)).ok


class TestCheck:

    @pytest.mark.asyncio
    async def test_all_ok(self) -> None:
        outcome = await BalanceAllowanceChecker(_reader(), SEPOLIA).check(WETH, ORDER_SIZE)
        assert outcome.ok
        assert outcome.native_balance == 10**18
        assert outcome.token_balance == 10**18
        assert outcome.allowance == UINT256_MAX

    @pytest.mark.asyncio
    async def test_native_short_circuits(self) -> None:
        reader = _reader(native=0)
        outcome = await BalanceAllowanceChecker(reader, SEPOLIA).check(WETH, ORDER_SIZE)
        assert outcome.status == CheckStatus.INSUFFICIENT_NATIVE
        reader.balance_of.assert_not_awaited()
        reader.allowance.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_balance_before_allowance(self) -> None:
        reader = _reader(balance=0, allowance=0)
        outcome = await BalanceAllowanceChecker(reader, SEPOLIA).check(WETH, ORDER_SIZE)
        assert outcome.status == CheckStatus.INSUFFICIENT_TOKEN
        reader.allowance.assert_not_awaited()


class TestVerifyDecimals:

    @pytest.mark.asyncio
    async def test_match(self) -> None:
        checker = BalanceAllowanceChecker(_reader(), SEPOLIA)
        await checker.verify_decimals(USDC)

    @pytest.mark.asyncio
    async def test_mismatch(self) -> None:
        reader = _reader(decimals={USDC.address: 18})
        checker = BalanceAllowanceChecker(reader, SEPOLIA)
        with pytest.raises(ConfigurationError, match="USDC"):
            await checker.verify_decimals(USDC)
