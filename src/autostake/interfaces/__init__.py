"""Protocol interfaces for all autostake collaborators."""

from autostake.interfaces.wallet import WalletProvider
from autostake.interfaces.contracts import PendingTransaction, SaleContract, TokenContract

__all__ = [
    "WalletProvider",
    "PendingTransaction",
    "SaleContract",
    "TokenContract",
]
