"""Value objects and operation results for the purchase flow."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from autostake.errors import ErrorKind

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
MAX_UINT256 = 2**256 - 1


@dataclass(frozen=True)
class Package:
    """A purchasable package as exposed by ``packages(index)``."""

    id: int  # fetch-time ordinal, also the contract lookup index
    required_in: int  # settlement token, smallest unit
    mint_out: int  # stake token, smallest unit
    active: bool


@dataclass(frozen=True)
class CatalogSnapshot:
    """Result of a catalog load."""

    packages: tuple[Package, ...] = ()
    condition: ErrorKind | None = None  # NO_PACKAGES_AVAILABLE when empty

    @property
    def empty(self) -> bool:
        return not self.packages


@dataclass(frozen=True)
class AllowanceState:
    owner: str
    spender: str
    amount: int


class AllowanceStatus(str, Enum):
    SUFFICIENT = "sufficient"
    INSUFFICIENT = "insufficient"


@dataclass(frozen=True)
class AllowanceCheck:
    """Outcome of a single allowance read against a required amount."""

    status: AllowanceStatus
    state: AllowanceState
    required: int

    @property
    def sufficient(self) -> bool:
        return self.status == AllowanceStatus.SUFFICIENT


@dataclass(frozen=True)
class ReferralCandidate:
    raw: str
    resolved: str


@dataclass(frozen=True)
class PurchaseIntent:
    package_id: int
    referrer: str
    account: str


@dataclass(frozen=True)
class TxReceipt:
    tx_hash: str
    block_number: int | None
    success: bool = True


@dataclass
class ApprovalResult:
    """Result of an approve() transaction."""

    success: bool
    tx_hash: str | None = None
    block_number: int | None = None
    error: ErrorKind | None = None
    message: str | None = None
    allowance: AllowanceState | None = None  # re-read after the attempt


class PurchaseState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    ALLOWANCE_CHECKED = "allowance_checked"
    SUBMITTING = "submitting"
    CONFIRMING = "confirming"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class PurchaseResult:
    """Terminal outcome of one purchase attempt."""

    state: PurchaseState
    package_id: int
    referrer: str | None = None
    tx_hash: str | None = None
    block_number: int | None = None
    error: ErrorKind | None = None
    message: str | None = None
    transitions: list[PurchaseState] = field(default_factory=list)
    allowance_after: AllowanceState | None = None  # informational only

    @property
    def success(self) -> bool:
        return self.state == PurchaseState.SUCCEEDED
