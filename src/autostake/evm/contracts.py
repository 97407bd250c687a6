"""web3.py bindings for the settlement token and the sale contract."""

from __future__ import annotations

import logging

from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError, TimeExhausted

from autostake.errors import (
    TransactionPendingError,
    TransactionRevertedError,
    WalletRejectedError,
)
from autostake.evm.abi import ERC20_ABI, SALE_ABI
from autostake.evm.errors import error_message, is_user_rejection, revert_reason
from autostake.models.records import TxReceipt

log = logging.getLogger(__name__)


def make_web3(url: str, timeout: int = 120) -> AsyncWeb3:
    """AsyncWeb3 pointed at the wallet endpoint so transact() is signed by it."""
    return AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(url, request_kwargs={"timeout": timeout}))


def _short(value: str) -> str:
    return f"{value[:10]}..." if value else "?"


class Web3PendingTransaction:
    """Awaitable handle on a broadcast transaction."""

    def __init__(self, w3: AsyncWeb3, tx_hash: str, receipt_timeout: int = 180) -> None:
        self._w3 = w3
        self.tx_hash = tx_hash
        self._receipt_timeout = receipt_timeout

    async def wait(self) -> TxReceipt:
        try:
            receipt = await self._w3.eth.wait_for_transaction_receipt(
                self.tx_hash, timeout=self._receipt_timeout,
            )
        except TimeExhausted as exc:
            raise TransactionPendingError(self.tx_hash, self._receipt_timeout) from exc

        block_number = receipt["blockNumber"]
        if receipt["status"] == 1:
            return TxReceipt(tx_hash=self.tx_hash, block_number=block_number)

        reason = await self._replay_for_reason(block_number)
        log.error("tx %s reverted in block %s: %s", _short(self.tx_hash), block_number, reason)
        raise TransactionRevertedError(reason, tx_hash=self.tx_hash, block_number=block_number)

    async def _replay_for_reason(self, block_number: int) -> str | None:
        """Re-run the reverted call with eth_call to recover its reason string."""
        try:
            tx = await self._w3.eth.get_transaction(self.tx_hash)
            await self._w3.eth.call(
                {
                    "from": tx["from"],
                    "to": tx["to"],
                    "data": tx["input"],
                    "value": tx.get("value", 0),
                },
                block_number,
            )
        except ContractLogicError as exc:
            return revert_reason(getattr(exc, "message", None) or str(exc))
        except Exception as exc:
            log.warning("revert reason lookup failed for %s: %s", _short(self.tx_hash), exc)
        return None


async def _transact(
    w3: AsyncWeb3, fn, sender: str, receipt_timeout: int,
) -> Web3PendingTransaction:
    """Send a contract function call through the wallet, mapping its errors."""
    try:
        raw_hash = await fn.transact({"from": sender})
    except ContractLogicError as exc:
        # estimate_gas reverted before the wallet ever saw the request
        raise TransactionRevertedError(
            revert_reason(getattr(exc, "message", None) or str(exc)),
        ) from exc
    except Exception as exc:
        if is_user_rejection(exc):
            raise WalletRejectedError(error_message(exc) or "User rejected the request") from exc
        raise
    return Web3PendingTransaction(w3, AsyncWeb3.to_hex(raw_hash), receipt_timeout)


class Web3TokenContract:
    """ERC-20 allowance/approve over web3.py."""

    def __init__(self, w3: AsyncWeb3, address: str, receipt_timeout: int = 180) -> None:
        self._w3 = w3
        self.address = AsyncWeb3.to_checksum_address(address)
        self._contract = w3.eth.contract(address=self.address, abi=ERC20_ABI)
        self._receipt_timeout = receipt_timeout

    async def allowance(self, owner: str, spender: str) -> int:
        return int(await self._contract.functions.allowance(owner, spender).call())

    async def approve(self, spender: str, amount: int, sender: str) -> Web3PendingTransaction:
        fn = self._contract.functions.approve(spender, amount)
        return await _transact(self._w3, fn, sender, self._receipt_timeout)


class Web3SaleContract:
    """Sale/stake contract over web3.py."""

    def __init__(self, w3: AsyncWeb3, address: str, receipt_timeout: int = 180) -> None:
        self._w3 = w3
        self.address = AsyncWeb3.to_checksum_address(address)
        self._contract = w3.eth.contract(address=self.address, abi=SALE_ABI)
        self._receipt_timeout = receipt_timeout

    async def package_count(self) -> int:
        return int(await self._contract.functions.packageCount().call())

    async def packages(self, index: int) -> tuple[int, int, bool]:
        usdt_in, mtec_out, active = await self._contract.functions.packages(index).call()
        return int(usdt_in), int(mtec_out), bool(active)

    async def buy_package(
        self, package_id: int, referrer: str, sender: str,
    ) -> Web3PendingTransaction:
        fn = self._contract.functions.buyPackage(package_id, referrer)
        return await _transact(self._w3, fn, sender, self._receipt_timeout)
