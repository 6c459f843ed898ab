"""RemediationAction — what the operator must do before an order can go through.

The workflow returns one of these instead of writing files; the calling
layer decides whether to render a script, print a hint, or act on it.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from config.networks import TokenInfo
from models.order import UINT256_MAX, from_base_units


class RemediationKind(str, Enum):
    """Kind of follow-up action."""

    APPROVE_TOKEN = "APPROVE_TOKEN"
    WRAP_NATIVE = "WRAP_NATIVE"
    FUND_NATIVE = "FUND_NATIVE"


class RemediationAction(BaseModel):
    """Follow-up action, e.g. "approve WETH for the router"."""

    model_config = ConfigDict(frozen=True)

    kind: RemediationKind
    network: str
    chain_id: int
    rpc_url: str
    native_symbol: str = "ETH"
    token: Optional[TokenInfo] = None
    spender: Optional[str] = None
    amount: Optional[int] = Field(default=None, ge=0, description="Base units")
    required: Optional[int] = Field(
        default=None, ge=0, description="Allowance the order needs; no approval at or above it"
    )
    reason: str = ""

    def describe(self) -> str:
        if self.kind == RemediationKind.APPROVE_TOKEN:
            symbol = self.token.symbol if self.token else "token"
            amount = "unlimited" if self.amount in (None, UINT256_MAX) else str(self.amount)
            return f"Approve {symbol} for spender {self.spender} ({amount}) on {self.network}"
        if self.kind == RemediationKind.WRAP_NATIVE:
            symbol = self.token.symbol if self.token else "wrapped native"
            return f"Wrap {self._human_amount()} {self.native_symbol} into {symbol} on {self.network}"
        return f"Fund the wallet with at least {self._human_amount()} {self.native_symbol} on {self.network}"

    def script_name(self) -> str:
        """File name for a rendered script, e.g. ``approve_weth.py``."""
        symbol = (self.token.symbol if self.token else self.native_symbol).lower()
        prefix = {
            RemediationKind.APPROVE_TOKEN: "approve",
            RemediationKind.WRAP_NATIVE: "wrap",
            RemediationKind.FUND_NATIVE: "fund",
        }[self.kind]
        return f"{prefix}_{symbol}.py"

    def _human_amount(self) -> str:
        # native and wrapped native both use 18 decimals
        return format(from_base_units(self.amount or 0, 18).normalize(), "f")
