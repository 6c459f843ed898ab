"""limit-order-lab — models package."""

from .maker_traits import MakerTraits
from .order import UINT40_MAX, UINT256_MAX, ZERO_ADDRESS, LimitOrder, from_base_units, to_base_units
from .remediation import RemediationAction, RemediationKind

__all__ = [
    "LimitOrder",
    "MakerTraits",
    "RemediationAction",
    "RemediationKind",
    "UINT256_MAX",
    "UINT40_MAX",
    "ZERO_ADDRESS",
    "from_base_units",
    "to_base_units",
]
