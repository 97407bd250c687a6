"""Chain session - wallet connection and network negotiation."""

from __future__ import annotations

import logging
from typing import Any, Callable

from autostake.address import short_address, to_checksum, same_address
from autostake.errors import ErrorKind, NoProviderError, ProviderRpcError
from autostake.evm.errors import error_message, is_unrecognized_chain, is_user_rejection
from autostake.interfaces.wallet import WalletProvider
from autostake.models.config import NetworkConfig
from autostake.models.session import SessionSnapshot, SessionStatus

log = logging.getLogger(__name__)

SessionListener = Callable[[SessionSnapshot], None]


def parse_chain_id(value: Any) -> int:
    """Chain ids arrive as hex strings from wallets, ints from tests."""
    if isinstance(value, str):
        return int(value, 16) if value.lower().startswith("0x") else int(value)
    return int(value)


class ChainSession:
    """Owns the wallet connection, current account and current chain.

    Every transition produces a fresh SessionSnapshot which is appended to
    ``history`` and handed to the optional listener. Wallet notifications are
    delivered through ``handle_accounts_changed`` / ``handle_chain_changed``
    by whatever transport the embedding application uses.
    """

    def __init__(
        self,
        provider: WalletProvider | None,
        network: NetworkConfig,
        listener: SessionListener | None = None,
        preferred_account: str = "",
    ) -> None:
        self._provider = provider
        self._network = network
        self._listener = listener
        self._preferred = preferred_account
        self._snapshot = SessionSnapshot()
        self._generation = 0
        self.history: list[SessionStatus] = []

    # ── Reads ─────────────────────────────────────────────

    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    def status(self) -> SessionStatus:
        return self._snapshot.status

    def current_account(self) -> str | None:
        return self._snapshot.account

    def current_chain_id(self) -> int | None:
        return self._snapshot.chain_id

    @property
    def expected_chain_id(self) -> int:
        return self._network.chain_id

    # ── Connect / negotiate ───────────────────────────────

    async def connect(self) -> SessionSnapshot:
        """Request account access and make sure the wallet is on our chain.

        Raises NoProviderError when there is no wallet to talk to. Every other
        failure ends in an ERROR snapshot with a reason and a message.
        """
        if self._provider is None:
            self._set(SessionStatus.DISCONNECTED)
            raise NoProviderError("No wallet provider found (MetaMask, Bitget, Frame...)")

        self._generation += 1
        generation = self._generation
        self._set(SessionStatus.CONNECTING)

        try:
            accounts = await self._provider.request("eth_requestAccounts")
        except NoProviderError:
            self._set(SessionStatus.DISCONNECTED)
            raise
        except ProviderRpcError as exc:
            kind = ErrorKind.USER_REJECTED if is_user_rejection(exc) else ErrorKind.NOT_CONNECTED
            return self._fail(kind, error_message(exc) or "Wallet refused account access")

        if generation != self._generation:
            return self._snapshot
        if not accounts:
            return self._fail(ErrorKind.NOT_CONNECTED, "Wallet returned no accounts")

        try:
            account = self._pick_account(accounts)
        except (AttributeError, TypeError, ValueError):
            return self._fail(
                ErrorKind.NOT_CONNECTED, f"Wallet returned an invalid account: {accounts!r}",
            )
        log.info("Wallet authorized %s", short_address(account))

        chain_id = await self._read_chain_id(generation)
        if chain_id is None:
            return self._snapshot
        if generation != self._generation:
            return self._snapshot

        if chain_id == self._network.chain_id:
            return self._ready(account, chain_id)

        log.info("Wallet on chain %d, expected %d", chain_id, self._network.chain_id)
        self._set(SessionStatus.WRONG_NETWORK, chain_id=chain_id)
        return await self._negotiate(account, generation)

    async def _negotiate(self, account: str, generation: int) -> SessionSnapshot:
        """switch -> add-if-unknown -> re-verify. No automatic retries."""
        self._set(SessionStatus.SWITCHING_NETWORK, chain_id=self._snapshot.chain_id)
        provider = self._provider
        assert provider is not None

        try:
            await provider.request(
                "wallet_switchEthereumChain",
                [{"chainId": self._network.chain_id_hex}],
            )
        except ProviderRpcError as exc:
            if generation != self._generation:
                return self._snapshot
            if not is_unrecognized_chain(exc):
                return self._wrong_network(error_message(exc))

            log.info("Chain %s unknown to wallet, adding it", self._network.chain_id_hex)
            try:
                await provider.request(
                    "wallet_addEthereumChain", [self._network.to_add_chain_params()],
                )
            except ProviderRpcError as add_exc:
                if generation != self._generation:
                    return self._snapshot
                return self._wrong_network(error_message(add_exc))

        chain_id = await self._read_chain_id(generation)
        if chain_id is None or generation != self._generation:
            return self._snapshot
        if chain_id != self._network.chain_id:
            return self._wrong_network(f"wallet still reports chain {chain_id}", chain_id)
        return self._ready(account, chain_id)

    async def _read_chain_id(self, generation: int) -> int | None:
        """None on failure; the ERROR is recorded unless the attempt went stale."""
        assert self._provider is not None
        try:
            raw = await self._provider.request("eth_chainId")
        except ProviderRpcError as exc:
            if generation == self._generation:
                self._fail(ErrorKind.NOT_CONNECTED, error_message(exc) or "Could not read chain id")
            return None
        try:
            return parse_chain_id(raw)
        except (TypeError, ValueError):
            if generation == self._generation:
                self._fail(ErrorKind.NOT_CONNECTED, f"Wallet returned an invalid chain id: {raw!r}")
            return None

    def _pick_account(self, accounts: list[str]) -> str:
        if self._preferred:
            for acc in accounts:
                if same_address(acc, self._preferred):
                    return to_checksum(acc)
        return to_checksum(accounts[0])

    # ── Wallet notifications ──────────────────────────────

    def handle_accounts_changed(self, accounts: list[str]) -> SessionSnapshot:
        """accountsChanged: empty list disconnects, otherwise switch account."""
        if not accounts:
            log.info("Wallet disconnected")
            self._generation += 1
            self._set(SessionStatus.DISCONNECTED)
            return self._snapshot

        if self._snapshot.status != SessionStatus.READY:
            log.debug("accountsChanged while %s, ignored", self._snapshot.status.value)
            return self._snapshot

        try:
            account = to_checksum(accounts[0])
        except (TypeError, ValueError):
            log.warning("accountsChanged with invalid account %r, ignored", accounts[0])
            return self._snapshot
        log.info("Account changed to %s", short_address(account))
        return self._ready(account, self._snapshot.chain_id)

    def handle_chain_changed(self, chain_id: Any) -> SessionSnapshot:
        """chainChanged: hard reset, the caller must reconnect from scratch."""
        try:
            new_chain: int | None = parse_chain_id(chain_id)
        except (TypeError, ValueError):
            new_chain = None
        log.info("Chain changed to %s, session reset", new_chain)
        self._generation += 1
        self._set(SessionStatus.DISCONNECTED, chain_id=new_chain)
        return self._snapshot

    def reset(self) -> SessionSnapshot:
        self._generation += 1
        self._set(SessionStatus.DISCONNECTED)
        return self._snapshot

    # ── Transitions ───────────────────────────────────────

    def _ready(self, account: str, chain_id: int | None) -> SessionSnapshot:
        self._set(SessionStatus.READY, account=account, chain_id=chain_id)
        log.info("Session ready: %s on chain %s", short_address(account), chain_id)
        return self._snapshot

    def _wrong_network(self, detail: str, chain_id: int | None = None) -> SessionSnapshot:
        message = (
            f"Please switch your wallet to {self._network.chain_name} "
            f"(chain id {self._network.chain_id}) manually and reconnect"
        )
        if detail:
            message = f"{message}: {detail}"
        return self._fail(ErrorKind.WRONG_NETWORK_PERSISTS, message, chain_id)

    def _fail(
        self, kind: ErrorKind, message: str, chain_id: int | None = None,
    ) -> SessionSnapshot:
        log.warning("Session error (%s): %s", kind.value, message)
        self._set(
            SessionStatus.ERROR,
            chain_id=chain_id if chain_id is not None else self._snapshot.chain_id,
            reason=kind,
            message=message,
        )
        return self._snapshot

    def _set(
        self,
        status: SessionStatus,
        account: str | None = None,
        chain_id: int | None = None,
        reason: ErrorKind | None = None,
        message: str | None = None,
    ) -> None:
        self._snapshot = SessionSnapshot(
            status=status,
            account=account if status == SessionStatus.READY else None,
            chain_id=chain_id,
            reason=reason,
            message=message,
        )
        self.history.append(status)
        if self._listener is not None:
            self._listener(self._snapshot)
