"""Tests for config/networks.py."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from config.networks import (
    LIMIT_ORDER_CONTRACT,
    NETWORKS,
    POLYGON,
    PROBE_NETWORKS,
    SEPOLIA,
    TokenInfo,
    get_network,
)
from core.errors import ConfigurationError


class TestNetworkConfig:

    def test_sepolia(self) -> None:
        assert SEPOLIA.chain_id == 11155111
        assert SEPOLIA.native_symbol == "ETH"
        assert SEPOLIA.token("WETH").decimals == 18
        assert SEPOLIA.token("USDC").decimals == 6
        assert SEPOLIA.min_native_balance == Decimal("0.001")

    def test_polygon(self) -> None:
        assert POLYGON.chain_id == 137
        assert POLYGON.native_symbol == "MATIC"
        assert POLYGON.token("WMATIC").decimals == 18
        assert POLYGON.token("USDC").decimals == 6
        assert POLYGON.min_native_balance == Decimal("0.1")

    def test_same_spender_everywhere(self) -> None:
        for network in NETWORKS.values():
            assert network.limit_order_contract == LIMIT_ORDER_CONTRACT

    def test_token_lookup_case_insensitive(self) -> None:
        assert SEPOLIA.token("weth") is SEPOLIA.token("WETH")

    def test_unknown_token(self) -> None:
        with pytest.raises(ConfigurationError, match="DAI"):
            SEPOLIA.token("DAI")

    def test_wrapped_native(self) -> None:
        assert SEPOLIA.wrapped_native is not None
        assert SEPOLIA.wrapped_native.symbol == "WETH"
        assert POLYGON.wrapped_native is not None
        assert POLYGON.wrapped_native.symbol == "WMATIC"

    def test_addresses_are_checksummed(self) -> None:
        assert SEPOLIA.token("WETH").address == "0xfFf9976782d46CC05630D1f6eBAb18b2324d6B14"

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            SEPOLIA.chain_id = 1  # type: ignore[misc]

    def test_app_url(self) -> None:
        assert POLYGON.app_url() == "https://app.1inch.io/#/137/limit-order/"


class TestTokenInfo:

    def test_decimals_bounds(self) -> None:
        with pytest.raises(ValidationError):
            TokenInfo(symbol="X", address=LIMIT_ORDER_CONTRACT, decimals=-1)

    def test_bad_address(self) -> None:
        with pytest.raises(ValidationError):
            TokenInfo(symbol="X", address="0x1234", decimals=6)


class TestRegistry:

    def test_get_network(self) -> None:
        assert get_network("Polygon") is POLYGON

    def test_unknown_network(self) -> None:
        with pytest.raises(ConfigurationError, match="goerli"):
            get_network("goerli")

    def test_probe_list(self) -> None:
        chain_ids = {chain_id for _, chain_id in PROBE_NETWORKS}
        assert {1, 137, 11155111} <= chain_ids
        assert len(PROBE_NETWORKS) == 7
