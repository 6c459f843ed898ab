"""Static per-chain configuration: RPC endpoint, tokens and the router/spender.

All records are immutable and built at import time.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from web3 import Web3

from core.errors import ConfigurationError

# 1inch Aggregation Router v6; settles v4 limit orders at this address on every chain below
LIMIT_ORDER_CONTRACT = "0x111111125421cA6dc452d289314280a0f8842A65"


class TokenInfo(BaseModel):
    """ERC-20 token as configured for a network."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., min_length=1)
    address: str
    decimals: int = Field(..., ge=0, le=36)
    is_wrapped_native: bool = False

    @field_validator("address")
    @classmethod
    def checksum_address(cls, v: str) -> str:
        """Store addresses in EIP-55 checksum form."""
        return Web3.to_checksum_address(v)


class NetworkConfig(BaseModel):
    """Chain id, RPC endpoint, token table and spender for one network."""

    model_config = ConfigDict(frozen=True)

    name: str
    chain_id: int = Field(..., gt=0)
    rpc_url: str
    native_symbol: str
    tokens: dict[str, TokenInfo]
    limit_order_contract: str = LIMIT_ORDER_CONTRACT
    min_native_balance: Decimal = Field(default=Decimal("0"), ge=0)
    explorer_url: str = ""

    @field_validator("limit_order_contract")
    @classmethod
    def checksum_spender(cls, v: str) -> str:
        return Web3.to_checksum_address(v)

    def token(self, symbol: str) -> TokenInfo:
        """Look up a configured token by symbol (case-insensitive)."""
        info = self.tokens.get(symbol.upper())
        if info is None:
            raise ConfigurationError(
                f"Token {symbol!r} is not configured for {self.name} "
                f"(known: {', '.join(sorted(self.tokens))})"
            )
        return info

    @property
    def wrapped_native(self) -> TokenInfo | None:
        for info in self.tokens.values():
            if info.is_wrapped_native:
                return info
        return None

    def app_url(self) -> str:
        """Link to the 1inch limit-order UI for this chain."""
        return f"https://app.1inch.io/#/{self.chain_id}/limit-order/"


SEPOLIA = NetworkConfig(
    name="sepolia",
    chain_id=11155111,
    rpc_url="https://sepolia.drpc.org",
    native_symbol="ETH",
    tokens={
        "WETH": TokenInfo(
            symbol="WETH",
            address="0xfff9976782d46cc05630d1f6ebab18b2324d6b14",
            decimals=18,
            is_wrapped_native=True,
        ),
        "USDC": TokenInfo(
            symbol="USDC",
            address="0x1c7d4b196cb0c7b01d743fbc6116a902379c7238",
            decimals=6,
        ),
    },
    min_native_balance=Decimal("0.001"),
    explorer_url="https://sepolia.etherscan.io",
)

POLYGON = NetworkConfig(
    name="polygon",
    chain_id=137,
    rpc_url="https://polygon-rpc.com",
    native_symbol="MATIC",
    tokens={
        "WMATIC": TokenInfo(
            symbol="WMATIC",
            address="0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270",
            decimals=18,
            is_wrapped_native=True,
        ),
        "USDC": TokenInfo(
            symbol="USDC",
            address="0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",
            decimals=6,
        ),
        "USDT": TokenInfo(
            symbol="USDT",
            address="0xc2132D05D31c914a87C6611C10748AEb04B58e8F",
            decimals=6,
        ),
    },
    min_native_balance=Decimal("0.1"),
    explorer_url="https://polygonscan.com",
)

NETWORKS: dict[str, NetworkConfig] = {
    SEPOLIA.name: SEPOLIA,
    POLYGON.name: POLYGON,
}

# Chains probed by scripts/check_networks.py
PROBE_NETWORKS: list[tuple[str, int]] = [
    ("Ethereum Mainnet", 1),
    ("Polygon", 137),
    ("BSC", 56),
    ("Arbitrum", 42161),
    ("Optimism", 10),
    ("Sepolia Testnet", 11155111),
    ("Goerli Testnet", 5),
]


def get_network(name: str) -> NetworkConfig:
    """Return a built-in network config by name."""
    try:
        return NETWORKS[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown network {name!r} (known: {', '.join(sorted(NETWORKS))})"
        ) from None
