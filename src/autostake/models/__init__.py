"""Data models for the autostake client."""

from autostake.models.config import (
    ClientConfig,
    ContractsConfig,
    NativeCurrency,
    NetworkConfig,
    TokenConfig,
)
from autostake.models.records import (
    MAX_UINT256,
    ZERO_ADDRESS,
    AllowanceCheck,
    AllowanceState,
    AllowanceStatus,
    ApprovalResult,
    CatalogSnapshot,
    Package,
    PurchaseIntent,
    PurchaseResult,
    PurchaseState,
    ReferralCandidate,
    TxReceipt,
)
from autostake.models.session import SessionSnapshot, SessionStatus
from autostake.models.snapshots import ClientSnapshot

__all__ = [
    "ClientConfig", "ContractsConfig", "NativeCurrency", "NetworkConfig", "TokenConfig",
    "MAX_UINT256", "ZERO_ADDRESS",
    "AllowanceCheck", "AllowanceState", "AllowanceStatus", "ApprovalResult",
    "CatalogSnapshot", "Package", "PurchaseIntent", "PurchaseResult", "PurchaseState",
    "ReferralCandidate", "TxReceipt",
    "SessionSnapshot", "SessionStatus",
    "ClientSnapshot",
]
