"""Contract binding protocols for the settlement token and the sale contract."""

from __future__ import annotations

from typing import Protocol

from autostake.models.records import TxReceipt


class PendingTransaction(Protocol):
    """A transaction accepted by the wallet and broadcast to the chain."""

    tx_hash: str

    async def wait(self) -> TxReceipt:
        """Wait for inclusion.

        Raises TransactionRevertedError on revert and TransactionPendingError
        when no receipt arrives in time.
        """
        ...


class TokenContract(Protocol):
    """ERC-20 settlement token (allowance/approve subset)."""

    address: str

    async def allowance(self, owner: str, spender: str) -> int:
        ...

    async def approve(self, spender: str, amount: int, sender: str) -> PendingTransaction:
        """Submit approve(spender, amount) from ``sender``.

        Raises WalletRejectedError if the user declines the prompt.
        """
        ...


class SaleContract(Protocol):
    """Sale/stake contract exposing fixed-index packages."""

    address: str

    async def package_count(self) -> int:
        ...

    async def packages(self, index: int) -> tuple[int, int, bool]:
        """Return (usdtIn, mtecOut, active) for ``index``."""
        ...

    async def buy_package(
        self, package_id: int, referrer: str, sender: str
    ) -> PendingTransaction:
        """Submit buyPackage(package_id, referrer) from ``sender``."""
        ...
