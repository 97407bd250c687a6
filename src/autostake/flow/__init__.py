"""Transaction-flow state machine components."""

from autostake.flow.allowance import AllowanceGate
from autostake.flow.catalog import PackageCatalog
from autostake.flow.guard import WriteGuard
from autostake.flow.purchase import PurchaseOrchestrator
from autostake.flow.referral import ReferralResolver
from autostake.flow.session import ChainSession

__all__ = [
    "AllowanceGate",
    "ChainSession",
    "PackageCatalog",
    "PurchaseOrchestrator",
    "ReferralResolver",
    "WriteGuard",
]
