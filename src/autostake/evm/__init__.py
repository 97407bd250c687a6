"""EVM integration components."""

from autostake.evm.contracts import (
    Web3PendingTransaction,
    Web3SaleContract,
    Web3TokenContract,
    make_web3,
)
from autostake.evm.provider import HttpWalletProvider

__all__ = [
    "HttpWalletProvider",
    "Web3PendingTransaction",
    "Web3SaleContract",
    "Web3TokenContract",
    "make_web3",
]
