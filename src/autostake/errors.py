"""Error taxonomy for the purchase flow.

Flow components report failures as result records carrying an ``ErrorKind``.
The exceptions below are raised by the provider and contract adapters and
translated into results at the flow boundary.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Failure categories surfaced to the presentation layer."""

    NO_PROVIDER = "no_provider"
    WRONG_NETWORK_PERSISTS = "wrong_network_persists"
    NO_PACKAGES_AVAILABLE = "no_packages_available"
    PACKAGE_INACTIVE = "package_inactive"
    ALLOWANCE_INSUFFICIENT = "allowance_insufficient"
    APPROVAL_FAILED = "approval_failed"
    USER_REJECTED = "user_rejected"
    TRANSACTION_FAILED = "transaction_failed"
    NOT_CONNECTED = "not_connected"
    WRITE_IN_FLIGHT = "write_in_flight"


class AutoStakeError(Exception):
    """Base class for all autostake errors."""

    kind: ErrorKind = ErrorKind.TRANSACTION_FAILED

    def __init__(self, message: str = "", kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class NoProviderError(AutoStakeError):
    """No wallet provider is available."""

    kind = ErrorKind.NO_PROVIDER


class ProviderRpcError(AutoStakeError):
    """A wallet provider request failed with an EIP-1193 error object."""

    def __init__(self, code: int | None, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.data = data

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"[{self.code}] {self.message}"


class WalletRejectedError(AutoStakeError):
    """The user declined the request in the wallet."""

    kind = ErrorKind.USER_REJECTED


class TransactionRevertedError(AutoStakeError):
    """A transaction reverted during estimation or after inclusion."""

    kind = ErrorKind.TRANSACTION_FAILED

    def __init__(
        self,
        reason: str | None = None,
        tx_hash: str | None = None,
        block_number: int | None = None,
    ) -> None:
        super().__init__(reason or "Transaction failed")
        self.reason = reason
        self.tx_hash = tx_hash
        self.block_number = block_number


class WriteInFlightError(AutoStakeError):
    """Another approve/purchase prompt is still outstanding for the account."""

    kind = ErrorKind.WRITE_IN_FLIGHT


class TransactionPendingError(AutoStakeError):
    """The transaction was broadcast but no receipt arrived before the timeout."""

    kind = ErrorKind.TRANSACTION_FAILED

    def __init__(self, tx_hash: str, timeout: int) -> None:
        super().__init__(
            f"Transaction {tx_hash} is still pending after {timeout}s; "
            "check your wallet before trying again"
        )
        self.tx_hash = tx_hash
        self.timeout = timeout
