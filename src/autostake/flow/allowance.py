"""Allowance gate - settlement-token allowance reads and max approval."""

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
from autostake.flow.guard import WriteGuard
from autostake.interfaces.contracts import TokenContract
from autostake.models.records import (
    MAX_UINT256,
    AllowanceCheck,
    AllowanceState,
    AllowanceStatus,
    ApprovalResult,
)

log = logging.getLogger(__name__)


class AllowanceGate:
    """Decides whether the owner has granted the spender enough tokens.

    Nothing is cached: every check is a fresh on-chain read, since the
    allowance can be spent or revoked out of band.
    """

    def __init__(self, token: TokenContract, guard: WriteGuard | None = None) -> None:
        self._token = token
        self._guard = guard or WriteGuard()

    async def read(self, owner: str, spender: str) -> AllowanceState:
        amount = await self._token.allowance(owner, spender)
        return AllowanceState(owner=owner, spender=spender, amount=amount)

    async def check(self, owner: str, spender: str, required: int) -> AllowanceCheck:
        state = await self.read(owner, spender)
        status = (
            AllowanceStatus.SUFFICIENT
            if state.amount >= required
            else AllowanceStatus.INSUFFICIENT
        )
        log.debug(
            "allowance %s -> %s: %d (required %d, %s)",
            short_address(owner), short_address(spender), state.amount, required, status.value,
        )
        return AllowanceCheck(status=status, state=state, required=required)

    async def approve(self, spender: str, owner: str) -> ApprovalResult:
        """Approve the maximum uint256 amount so one approval covers any package.

        Returns once the approval is mined. The allowance is re-read after
        every attempt, successful or not.
        """
        log.info("Approving %s to spend max for %s", short_address(spender), short_address(owner))

        try:
            async with self._guard.hold(owner, "approve"):
                result = await self._submit_approval(spender, owner)
        except WriteInFlightError as exc:
            return ApprovalResult(
                success=False, error=ErrorKind.WRITE_IN_FLIGHT, message=exc.message,
            )

        try:
            result.allowance = await self.read(owner, spender)
        except Exception as exc:
            log.warning("allowance re-read after approve failed: %s", exc)
        return result

    async def _submit_approval(self, spender: str, owner: str) -> ApprovalResult:
        tx_hash: str | None = None
        try:
            pending = await self._token.approve(spender, MAX_UINT256, owner)
            tx_hash = pending.tx_hash
            log.info("Approve sent (tx=%s), waiting for confirmation", tx_hash[:16])
            receipt = await pending.wait()
        except WalletRejectedError as exc:
            log.info("Approve rejected in wallet")
            return ApprovalResult(
                success=False,
                error=ErrorKind.APPROVAL_FAILED,
                message=exc.message or "Approval rejected",
            )
        except TransactionRevertedError as exc:
            log.error("Approve reverted (tx=%s): %s", (exc.tx_hash or tx_hash or "?")[:16], exc.reason)
            return ApprovalResult(
                success=False,
                tx_hash=exc.tx_hash or tx_hash,
                block_number=exc.block_number,
                error=ErrorKind.APPROVAL_FAILED,
                message=exc.reason or "Approval failed",
            )
        except TransactionPendingError as exc:
            log.warning("Approve %s not confirmed in time", exc.tx_hash)
            return ApprovalResult(
                success=False,
                tx_hash=exc.tx_hash,
                error=ErrorKind.APPROVAL_FAILED,
                message=exc.message,
            )
        except Exception as exc:
            log.error("Approve unexpected error: %s", exc)
            return ApprovalResult(
                success=False,
                tx_hash=tx_hash,
                error=ErrorKind.APPROVAL_FAILED,
                message=error_message(exc) or "Approval failed",
            )

        log.info("Approve confirmed in block %s", receipt.block_number)
        return ApprovalResult(
            success=True, tx_hash=receipt.tx_hash, block_number=receipt.block_number,
        )
