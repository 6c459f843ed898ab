"""OrderBuilder — assembles v4 limit orders with a fresh salt and nonce."""

from __future__ import annotations

import secrets
import time
from decimal import Decimal
from typing import Callable

import structlog
from web3 import Web3

from config.networks import TokenInfo
from models.maker_traits import MakerTraits
from models.order import ZERO_ADDRESS, LimitOrder, to_base_units

logger = structlog.get_logger("execution.order_builder")

DEFAULT_EXPIRATION_SECONDS = 120

_SALT_BOUND = 2**256
_NONCE_BOUND = 2**40
_UINT160_MASK = (1 << 160) - 1


class OrderBuilder:
    """Builds orders for one maker.

    Salt and nonce are sampled on every ``build`` call, so two orders with
    identical parameters are still distinct.  Amounts are not validated
    (zero amounts or identical assets are the caller's problem).

    Parameters
    ----------
    maker:
        Maker address.
    clock:
        Returns the current unix time; injectable for tests.
    rng:
        ``rng(n)`` returns a uniform int in ``[0, n)``.
    """

    def __init__(
        self,
        maker: str,
        clock: Callable[[], float] = time.time,
        rng: Callable[[int], int] = secrets.randbelow,
    ) -> None:
        self._maker = Web3.to_checksum_address(maker)
        self._clock = clock
        self._rng = rng

    @property
    def maker(self) -> str:
        return self._maker

    def build(
        self,
        maker_asset: str,
        taker_asset: str,
        making_amount: int,
        taking_amount: int,
        expires_in_seconds: int = DEFAULT_EXPIRATION_SECONDS,
        receiver: str = ZERO_ADDRESS,
        allow_multiple_fills: bool = False,
        extension: str = "0x",
    ) -> LimitOrder:
        """Return a new order expiring *expires_in_seconds* from now."""
        expiration = int(self._clock()) + expires_in_seconds
        nonce = self._rng(_NONCE_BOUND)

        traits = MakerTraits.default().with_expiration(expiration).with_nonce(nonce)
        if allow_multiple_fills:
            traits = traits.allow_multiple_fills()

        if extension not in ("", "0x"):
            # the protocol binds an extension through the salt's low 160 bits
            ext_hash = int.from_bytes(Web3.keccak(hexstr=extension), "big")
            salt = (self._rng(2**96) << 160) | (ext_hash & _UINT160_MASK)
            traits = traits.with_extension()
        else:
            salt = self._rng(_SALT_BOUND)
            extension = "0x"

        order = LimitOrder(
            salt=salt,
            maker=self._maker,
            receiver=receiver,
            maker_asset=maker_asset,
            taker_asset=taker_asset,
            making_amount=making_amount,
            taking_amount=taking_amount,
            maker_traits=traits.as_int(),
            extension=extension,
        )
        logger.info(
            "order_builder.built",
            maker_asset=order.maker_asset,
            taker_asset=order.taker_asset,
            making_amount=str(making_amount),
            taking_amount=str(taking_amount),
            expiration=expiration,
        )
        return order

    @staticmethod
    def amounts_for(
        maker_token: TokenInfo,
        making: Decimal | str,
        taker_token: TokenInfo,
        taking: Decimal | str,
    ) -> tuple[int, int]:
        """Scale human amounts by each token's own decimals."""
        return (
            to_base_units(making, maker_token.decimals),
            to_base_units(taking, taker_token.decimals),
        )
