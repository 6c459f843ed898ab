"""Tests for models/order.py — includes property-based tests via hypothesis."""

from __future__ import annotations

from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from config.networks import SEPOLIA
from models.order import (
    UINT256_MAX,
    ZERO_ADDRESS,
    LimitOrder,
    from_base_units,
    to_base_units,
)

MAKER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
WETH = SEPOLIA.token("WETH").address
USDC = SEPOLIA.token("USDC").address


def _make_order(**kwargs) -> LimitOrder:
    defaults = {
        "salt": 123,
        "maker": MAKER,
        "maker_asset": WETH,
        "taker_asset": USDC,
        "making_amount": 100_000_000_000_000,
        "taking_amount": 100_000,
        "maker_traits": 5,
    }
    defaults.update(kwargs)
    return LimitOrder(**defaults)


# ── Base-unit conversion ─────────────────────────────────────────────


class TestToBaseUnits:

    def test_weth_amount(self) -> None:
        assert to_base_units(Decimal("0.0001"), 18) == 100_000_000_000_000

    def test_usdc_amount(self) -> None:
        assert to_base_units(Decimal("0.1"), 6) == 100_000

    def test_string_and_int(self) -> None:
        assert to_base_units("1.5", 6) == 1_500_000
        assert to_base_units(2, 6) == 2_000_000

    def test_zero_decimals(self) -> None:
        assert to_base_units(Decimal("7"), 0) == 7

    def test_float_rejected(self) -> None:
        with pytest.raises(TypeError):
            to_base_units(0.1, 18)  # type: ignore[arg-type]

    def test_excess_precision(self) -> None:
        with pytest.raises(ValueError, match="precision"):
            to_base_units(Decimal("0.0000001"), 6)

    def test_negative(self) -> None:
        with pytest.raises(ValueError):
            to_base_units(Decimal("-1"), 6)

    def test_not_a_number(self) -> None:
        with pytest.raises(ValueError):
            to_base_units("abc", 6)
        with pytest.raises(ValueError):
            to_base_units(Decimal("NaN"), 6)
        with pytest.raises(ValueError):
            to_base_units(Decimal("Infinity"), 6)

    def test_large_amount_exact(self) -> None:
        # 31 significant digits; must not be rounded
        assert to_base_units("1234567890123.456789012345678901", 18) == 1234567890123456789012345678901


class TestBaseUnitProperties:

    @given(
        raw=st.integers(min_value=0, max_value=UINT256_MAX),
        decimals=st.integers(min_value=0, max_value=36),
    )
    def test_from_then_to_is_identity(self, raw: int, decimals: int) -> None:
        assert to_base_units(from_base_units(raw, decimals), decimals) == raw

    @given(
        amount=st.decimals(
            min_value="0",
            max_value="1000000",
            places=6,
            allow_nan=False,
            allow_infinity=False,
        )
    )
    def test_six_decimal_amounts_scale(self, amount: Decimal) -> None:
        assert Decimal(to_base_units(amount, 6)) == amount * 1_000_000


# ── LimitOrder ───────────────────────────────────────────────────────


class TestLimitOrder:

    def test_defaults(self) -> None:
        order = _make_order()
        assert order.receiver == ZERO_ADDRESS
        assert order.extension == "0x"

    def test_addresses_checksummed(self) -> None:
        order = _make_order(maker=MAKER.lower())
        assert order.maker == MAKER

    def test_typed_message(self) -> None:
        msg = _make_order().to_typed_message()
        assert list(msg) == [
            "salt",
            "maker",
            "receiver",
            "makerAsset",
            "takerAsset",
            "makingAmount",
            "takingAmount",
            "makerTraits",
        ]
        assert msg["makingAmount"] == 100_000_000_000_000

    def test_api_data_is_strings(self) -> None:
        data = _make_order().to_api_data()
        assert data["makingAmount"] == "100000000000000"
        assert data["takingAmount"] == "100000"
        assert data["makerTraits"] == "5"
        assert data["extension"] == "0x"
        assert all(isinstance(v, str) for v in data.values())

    def test_extension_normalised(self) -> None:
        assert _make_order(extension="0xDEADBEEF").extension == "0xdeadbeef"

    @pytest.mark.parametrize("extension", ["deadbeef", "0xabc", "0xzz"])
    def test_bad_extension(self, extension: str) -> None:
        with pytest.raises(ValidationError):
            _make_order(extension=extension)

    def test_amount_bounds(self) -> None:
        with pytest.raises(ValidationError):
            _make_order(making_amount=-1)
        with pytest.raises(ValidationError):
            _make_order(salt=UINT256_MAX + 1)

    def test_frozen(self) -> None:
        order = _make_order()
        with pytest.raises(ValidationError):
            order.salt = 1  # type: ignore[misc]
