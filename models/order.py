"""LimitOrder — the v4 order struct plus exact base-unit conversion helpers.

Amounts are integers in token base units.  Human quantities go through
``to_base_units`` with the token's declared decimals; floats are never
accepted.
"""

from __future__ import annotations

from decimal import Context, Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from web3 import Web3

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
UINT256_MAX = 2**256 - 1
UINT40_MAX = 2**40 - 1

# uint256 has 78 digits; the default context would round at 28
_WIDE = Context(prec=100)


class LimitOrder(BaseModel):
    """Signed-intent order: sell ``making_amount`` of maker asset for ``taking_amount``."""

    model_config = ConfigDict(frozen=True)

    salt: int = Field(..., ge=0, le=UINT256_MAX)
    maker: str
    receiver: str = Field(default=ZERO_ADDRESS, description="Zero address = maker")
    maker_asset: str
    taker_asset: str
    making_amount: int = Field(..., ge=0, le=UINT256_MAX)
    taking_amount: int = Field(..., ge=0, le=UINT256_MAX)
    maker_traits: int = Field(default=0, ge=0, le=UINT256_MAX)
    extension: str = "0x"

    @field_validator("maker", "receiver", "maker_asset", "taker_asset")
    @classmethod
    def checksum_address(cls, v: str) -> str:
        return Web3.to_checksum_address(v)

    @field_validator("extension")
    @classmethod
    def hex_extension(cls, v: str) -> str:
        """extension is a 0x-prefixed hex blob, possibly empty."""
        if not v.startswith("0x"):
            raise ValueError("extension must be 0x-prefixed hex")
        body = v[2:]
        if len(body) % 2:
            raise ValueError("extension must contain whole bytes")
        try:
            bytes.fromhex(body)
        except ValueError:
            raise ValueError("extension is not valid hex") from None
        return v.lower()

    def to_typed_message(self) -> dict[str, Any]:
        """EIP-712 ``message`` for the Order struct (int values)."""
        return {
            "salt": self.salt,
            "maker": self.maker,
            "receiver": self.receiver,
            "makerAsset": self.maker_asset,
            "takerAsset": self.taker_asset,
            "makingAmount": self.making_amount,
            "takingAmount": self.taking_amount,
            "makerTraits": self.maker_traits,
        }

    def to_api_data(self) -> dict[str, str]:
        """Wire form expected by the order-book service (all strings)."""
        data = {key: str(value) for key, value in self.to_typed_message().items()}
        data["extension"] = self.extension
        return data


def to_base_units(amount: Decimal | str | int, decimals: int) -> int:
    """Scale a human quantity to integer base units, exactly.

    Raises
    ------
    TypeError
        If *amount* is a float.
    ValueError
        If *amount* is negative, not a number, or has more fractional
        digits than *decimals* allows.
    """
    if isinstance(amount, float):
        raise TypeError("amount must be Decimal, str or int, not float")
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    try:
        value = Decimal(amount)
    except InvalidOperation:
        raise ValueError(f"amount is not a number: {amount!r}") from None
    if not value.is_finite():
        raise ValueError(f"amount must be finite, got {amount!r}")
    if value < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")

    scaled = value.scaleb(decimals, context=_WIDE)
    if scaled != scaled.to_integral_value():
        raise ValueError(
            f"{amount} has more precision than {decimals} decimals allow"
        )
    return int(scaled)


def from_base_units(raw: int, decimals: int) -> Decimal:
    """Inverse of :func:`to_base_units`."""
    return Decimal(raw).scaleb(-decimals, context=_WIDE)
