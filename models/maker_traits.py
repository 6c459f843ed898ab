"""MakerTraits — the packed 256-bit order metadata of limit order protocol v4.

Layout (low to high)::

    [0, 80)     low 80 bits of the allowed sender (0 = anyone)
    [80, 120)   expiration timestamp (0 = never)
    [120, 160)  nonce, or epoch when the epoch manager is used
    [160, 200)  series
    247..255    flags (see below)

Every builder method returns a new instance; the integer value is the
only state.
"""

from __future__ import annotations

from web3 import Web3

NO_PARTIAL_FILLS_FLAG = 255
ALLOW_MULTIPLE_FILLS_FLAG = 254
PRE_INTERACTION_CALL_FLAG = 252
POST_INTERACTION_CALL_FLAG = 251
NEED_CHECK_EPOCH_MANAGER_FLAG = 250
HAS_EXTENSION_FLAG = 249
USE_PERMIT2_FLAG = 248
UNWRAP_WETH_FLAG = 247

_ALLOWED_SENDER_OFFSET, _ALLOWED_SENDER_BITS = 0, 80
_EXPIRATION_OFFSET, _EXPIRATION_BITS = 80, 40
_NONCE_OFFSET, _NONCE_BITS = 120, 40
_SERIES_OFFSET, _SERIES_BITS = 160, 40

_UINT256_MASK = (1 << 256) - 1


def _mask(bits: int) -> int:
    return (1 << bits) - 1


class MakerTraits:
    """Immutable builder over the maker-traits integer."""

    __slots__ = ("_value",)

    def __init__(self, value: int = 0) -> None:
        if not 0 <= value <= _UINT256_MASK:
            raise ValueError("maker traits must fit in uint256")
        self._value = value

    @classmethod
    def default(cls) -> MakerTraits:
        return cls(0)

    # ── Field helpers ────────────────────────────────────────────

    def _get(self, offset: int, bits: int) -> int:
        return (self._value >> offset) & _mask(bits)

    def _set(self, offset: int, bits: int, field: int, name: str) -> MakerTraits:
        if not 0 <= field <= _mask(bits):
            raise ValueError(f"{name} must fit in {bits} bits, got {field}")
        cleared = self._value & ~(_mask(bits) << offset) & _UINT256_MASK
        return MakerTraits(cleared | (field << offset))

    def _flag(self, bit: int) -> bool:
        return bool((self._value >> bit) & 1)

    def _with_flag(self, bit: int, enabled: bool = True) -> MakerTraits:
        if enabled:
            return MakerTraits(self._value | (1 << bit))
        return MakerTraits(self._value & ~(1 << bit) & _UINT256_MASK)

    # ── Builders ─────────────────────────────────────────────────

    def with_expiration(self, timestamp: int) -> MakerTraits:
        return self._set(_EXPIRATION_OFFSET, _EXPIRATION_BITS, timestamp, "expiration")

    def with_nonce(self, nonce: int) -> MakerTraits:
        return self._set(_NONCE_OFFSET, _NONCE_BITS, nonce, "nonce")

    def with_series(self, series: int) -> MakerTraits:
        return self._set(_SERIES_OFFSET, _SERIES_BITS, series, "series")

    def with_epoch(self, series: int, epoch: int) -> MakerTraits:
        """Bind the order to an epoch of the series (checked by the epoch manager)."""
        return (
            self.with_series(series)
            .with_nonce(epoch)
            ._with_flag(NEED_CHECK_EPOCH_MANAGER_FLAG)
        )

    def with_allowed_sender(self, address: str) -> MakerTraits:
        low80 = int(Web3.to_checksum_address(address), 16) & _mask(_ALLOWED_SENDER_BITS)
        return self._set(_ALLOWED_SENDER_OFFSET, _ALLOWED_SENDER_BITS, low80, "allowed sender")

    def allow_multiple_fills(self) -> MakerTraits:
        return self._with_flag(ALLOW_MULTIPLE_FILLS_FLAG)

    def disable_partial_fills(self) -> MakerTraits:
        return self._with_flag(NO_PARTIAL_FILLS_FLAG)

    def enable_native_unwrap(self) -> MakerTraits:
        return self._with_flag(UNWRAP_WETH_FLAG)

    def enable_permit2(self) -> MakerTraits:
        return self._with_flag(USE_PERMIT2_FLAG)

    def with_extension(self) -> MakerTraits:
        return self._with_flag(HAS_EXTENSION_FLAG)

    # ── Accessors ────────────────────────────────────────────────

    @property
    def expiration(self) -> int:
        return self._get(_EXPIRATION_OFFSET, _EXPIRATION_BITS)

    @property
    def nonce(self) -> int:
        return self._get(_NONCE_OFFSET, _NONCE_BITS)

    @property
    def series(self) -> int:
        return self._get(_SERIES_OFFSET, _SERIES_BITS)

    @property
    def allowed_sender_low80(self) -> int:
        return self._get(_ALLOWED_SENDER_OFFSET, _ALLOWED_SENDER_BITS)

    @property
    def is_partial_fill_allowed(self) -> bool:
        return not self._flag(NO_PARTIAL_FILLS_FLAG)

    @property
    def is_multiple_fills_allowed(self) -> bool:
        return self._flag(ALLOW_MULTIPLE_FILLS_FLAG)

    @property
    def has_extension(self) -> bool:
        return self._flag(HAS_EXTENSION_FLAG)

    @property
    def is_native_unwrap_enabled(self) -> bool:
        return self._flag(UNWRAP_WETH_FLAG)

    @property
    def is_epoch_manager_required(self) -> bool:
        return self._flag(NEED_CHECK_EPOCH_MANAGER_FLAG)

    def as_int(self) -> int:
        return self._value

    # ── Dunder ───────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MakerTraits):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return (
            f"MakerTraits(expiration={self.expiration}, nonce={self.nonce}, "
            f"series={self.series}, value={hex(self._value)})"
        )
