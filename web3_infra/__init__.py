"""limit-order-lab — web3_infra package.

- OrderSigner: EIP-712 signing of limit orders (eth_account)
- TokenClient: ERC-20 / wrapped-native reads and approve/wrap transactions
"""

from .eip712_signer import OrderSigner, SignedOrder
from .erc20 import TokenClient, TxResult, TxStatus

__all__ = [
    "OrderSigner",
    "SignedOrder",
    "TokenClient",
    "TxResult",
    "TxStatus",
]
