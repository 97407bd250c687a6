"""Purchase orchestrator - validate, gate on allowance, buy, confirm."""

from __future__ import annotations

import logging

from autostake.address import short_address
from autostake.errors import (
    ErrorKind,
    TransactionPendingError,
    TransactionRevertedError,
    WalletRejectedError,
    WriteInFlightError,
)
from autostake.evm.errors import error_message
from autostake.flow.allowance import AllowanceGate
from autostake.flow.catalog import PackageCatalog
from autostake.flow.guard import WriteGuard
from autostake.flow.referral import ReferralResolver
from autostake.flow.session import ChainSession
from autostake.interfaces.contracts import SaleContract
from autostake.models.records import PurchaseIntent, PurchaseResult, PurchaseState

log = logging.getLogger(__name__)


class _Attempt:
    """Per-attempt state machine bookkeeping."""

    def __init__(self, package_id: int) -> None:
        self.result = PurchaseResult(state=PurchaseState.IDLE, package_id=package_id)
        self.result.transitions.append(PurchaseState.IDLE)

    def enter(self, state: PurchaseState) -> None:
        self.result.state = state
        self.result.transitions.append(state)

    def fail(self, kind: ErrorKind, message: str) -> PurchaseResult:
        self.result.error = kind
        self.result.message = message
        self.enter(PurchaseState.FAILED)
        return self.result


class PurchaseOrchestrator:
    """Runs one buyPackage() attempt end to end.

    IDLE -> VALIDATING -> ALLOWANCE_CHECKED -> SUBMITTING -> CONFIRMING
    -> SUCCEEDED | FAILED. Validation failures touch no chain state, the
    allowance is never auto-approved and nothing is retried. Every call
    starts over and re-reads the allowance.
    """

    def __init__(
        self,
        session: ChainSession,
        catalog: PackageCatalog,
        gate: AllowanceGate,
        resolver: ReferralResolver,
        sale: SaleContract,
        guard: WriteGuard | None = None,
    ) -> None:
        self._session = session
        self._catalog = catalog
        self._gate = gate
        self._resolver = resolver
        self._sale = sale
        self._guard = guard or WriteGuard()

    def busy(self, account: str | None = None) -> bool:
        return self._guard.busy(account)

    async def purchase(self, package_id: int, referral_raw: str | None = None) -> PurchaseResult:
        attempt = _Attempt(package_id)

        # ── Validating ────────────────────────────────────
        attempt.enter(PurchaseState.VALIDATING)
        account = self._session.current_account()
        if not self._session.snapshot().ready or account is None:
            return attempt.fail(ErrorKind.NOT_CONNECTED, "Connect your wallet first")

        package = self._catalog.get(package_id)
        if package is None:
            return attempt.fail(ErrorKind.PACKAGE_INACTIVE, f"Package #{package_id} does not exist")
        if not package.active:
            return attempt.fail(ErrorKind.PACKAGE_INACTIVE, f"Package #{package_id} is not active")
        if self._guard.busy(account):
            return attempt.fail(
                ErrorKind.WRITE_IN_FLIGHT, "Another transaction is waiting in your wallet",
            )

        referrer = self._resolver.resolve(referral_raw, account)
        intent = PurchaseIntent(package_id=package.id, referrer=referrer, account=account)
        attempt.result.referrer = referrer

        # ── Allowance ─────────────────────────────────────
        try:
            check = await self._gate.check(account, self._sale.address, package.required_in)
        except Exception as exc:
            log.error("allowance read failed: %s", exc)
            return attempt.fail(
                ErrorKind.TRANSACTION_FAILED, error_message(exc) or "Could not read allowance",
            )
        attempt.enter(PurchaseState.ALLOWANCE_CHECKED)
        if not check.sufficient:
            return attempt.fail(
                ErrorKind.ALLOWANCE_INSUFFICIENT,
                f"Allowance {check.state.amount} is below the required "
                f"{package.required_in}; approve the token first",
            )

        try:
            async with self._guard.hold(account, "purchase"):
                await self._submit_and_confirm(attempt, intent)
        except WriteInFlightError as exc:
            return attempt.fail(ErrorKind.WRITE_IN_FLIGHT, exc.message)

        if attempt.result.success:
            try:
                attempt.result.allowance_after = await self._gate.read(account, self._sale.address)
            except Exception as exc:
                log.warning("allowance refresh after purchase failed: %s", exc)
        return attempt.result

    async def _submit_and_confirm(self, attempt: _Attempt, intent: PurchaseIntent) -> None:
        # ── Submitting ────────────────────────────────────
        attempt.enter(PurchaseState.SUBMITTING)
        log.info(
            "buyPackage(%d, %s) from %s",
            intent.package_id, short_address(intent.referrer), short_address(intent.account),
        )
        try:
            pending = await self._sale.buy_package(
                intent.package_id, intent.referrer, intent.account,
            )
        except WalletRejectedError as exc:
            log.info("Purchase rejected in wallet")
            attempt.fail(ErrorKind.USER_REJECTED, exc.message or "Transaction rejected")
            return
        except TransactionRevertedError as exc:
            log.error("buyPackage would revert: %s", exc.reason)
            attempt.fail(ErrorKind.TRANSACTION_FAILED, exc.reason or "Transaction failed")
            return
        except Exception as exc:
            log.error("buyPackage submission error: %s", exc)
            attempt.fail(ErrorKind.TRANSACTION_FAILED, error_message(exc) or "Transaction failed")
            return

        # ── Confirming ────────────────────────────────────
        attempt.result.tx_hash = pending.tx_hash
        attempt.enter(PurchaseState.CONFIRMING)
        log.info("Purchase sent (tx=%s), waiting for confirmation", pending.tx_hash[:16])
        try:
            receipt = await pending.wait()
        except TransactionRevertedError as exc:
            attempt.result.block_number = exc.block_number
            attempt.fail(ErrorKind.TRANSACTION_FAILED, exc.reason or "Transaction failed")
            return
        except TransactionPendingError as exc:
            log.warning("Purchase %s not confirmed in time", exc.tx_hash)
            attempt.fail(ErrorKind.TRANSACTION_FAILED, exc.message)
            return
        except Exception as exc:
            log.error("Waiting for purchase receipt failed: %s", exc)
            attempt.fail(ErrorKind.TRANSACTION_FAILED, error_message(exc) or "Transaction failed")
            return

        attempt.result.block_number = receipt.block_number
        attempt.enter(PurchaseState.SUCCEEDED)
        log.info(
            "Package #%d purchased and staked in block %s", intent.package_id, receipt.block_number,
        )
