"""Client facade - wires the flow components together for a presentation layer."""

from __future__ import annotations

import logging

from autostake.address import short_address
from autostake.errors import ErrorKind, NoProviderError
from autostake.evm.contracts import Web3SaleContract, Web3TokenContract, make_web3
from autostake.evm.errors import error_message
from autostake.evm.provider import HttpWalletProvider
from autostake.flow.allowance import AllowanceGate
from autostake.flow.catalog import PackageCatalog
from autostake.flow.guard import WriteGuard
from autostake.flow.purchase import PurchaseOrchestrator
from autostake.flow.referral import ReferralResolver
from autostake.flow.session import ChainSession, SessionListener
from autostake.interfaces.contracts import SaleContract, TokenContract
from autostake.interfaces.wallet import WalletProvider
from autostake.models.config import ClientConfig
from autostake.models.records import AllowanceCheck, ApprovalResult, PurchaseResult
from autostake.models.snapshots import ClientSnapshot

log = logging.getLogger(__name__)


class AutoStakeClient:
    """Connect, pick a package, approve, buy and share a referral link.

    Every user-facing action returns an explicit result or ClientSnapshot;
    the client never renders anything itself.
    """

    def __init__(
        self,
        cfg: ClientConfig,
        provider: WalletProvider | None,
        token: TokenContract,
        sale: SaleContract,
        listener: SessionListener | None = None,
    ) -> None:
        self._cfg = cfg
        self.provider = provider
        self.token = token
        self.sale = sale

        self.guard = WriteGuard()
        self.session = ChainSession(provider, cfg.network, listener, cfg.account)
        self.catalog = PackageCatalog()
        self.resolver = ReferralResolver(cfg.referral_param)
        self.gate = AllowanceGate(token, self.guard)
        self.orchestrator = PurchaseOrchestrator(
            self.session, self.catalog, self.gate, self.resolver, sale, self.guard,
        )

        self.selected_id: int | None = None
        self.allowance: AllowanceCheck | None = None
        self.reload_required = False
        self._page_url: str | None = None

    @classmethod
    def from_config(
        cls, cfg: ClientConfig, listener: SessionListener | None = None,
    ) -> "AutoStakeClient":
        """Build a client talking to the configured wallet endpoint via web3."""
        provider = HttpWalletProvider(cfg.wallet_url, cfg.wallet_timeout)
        w3 = make_web3(cfg.wallet_url, cfg.wallet_timeout)
        token = Web3TokenContract(w3, cfg.contracts.settlement_token, cfg.receipt_timeout)
        sale = Web3SaleContract(w3, cfg.contracts.sale, cfg.receipt_timeout)
        return cls(cfg, provider, token, sale, listener)

    async def close(self) -> None:
        close = getattr(self.provider, "close", None)
        if close is not None:
            await close()

    @property
    def busy(self) -> bool:
        return self.guard.busy(self.session.current_account())

    # ── Snapshots ─────────────────────────────────────────

    def snapshot(self, message: str | None = None, error: bool = False) -> ClientSnapshot:
        account = self.session.current_account()
        link = None
        if account and self._page_url:
            link = self.resolver.build_link(self._page_url, account)
        return ClientSnapshot(
            session=self.session.snapshot(),
            packages=list(self.catalog.packages),
            selected=self.catalog.get(self.selected_id) if self.selected_id is not None else None,
            allowance=self.allowance,
            referral_link=link,
            message=message,
            error=error,
            busy=self.busy,
            reload_required=self.reload_required,
        )

    # ── Actions ───────────────────────────────────────────

    async def connect(self, page_url: str | None = None) -> ClientSnapshot:
        """Negotiate the session, then load packages and the allowance."""
        if page_url is not None:
            self._page_url = page_url
        self._clear_caches()

        try:
            session = await self.session.connect()
        except NoProviderError as exc:
            return self.snapshot(exc.message, error=True)
        self.reload_required = False

        if not session.ready:
            return self.snapshot(session.message, error=True)

        try:
            catalog = await self.catalog.load(self.sale)
        except Exception as exc:
            log.error("package load failed: %s", exc)
            self._clear_caches()
            return self.snapshot(error_message(exc) or "Could not load packages", error=True)
        if catalog.condition == ErrorKind.NO_PACKAGES_AVAILABLE:
            return self.snapshot("No packages available in the contract", error=True)

        default = self.catalog.select_default()
        self.selected_id = default.id if default is not None else None
        try:
            await self.refresh_allowance()
        except Exception as exc:
            log.error("allowance read failed: %s", exc)
            return self.snapshot(error_message(exc) or "Could not read allowance", error=True)
        return self.snapshot("Connected")

    async def select(self, package_id: int) -> ClientSnapshot:
        if self.catalog.get(package_id) is None:
            return self.snapshot(f"Package #{package_id} does not exist", error=True)
        self.selected_id = package_id
        try:
            await self.refresh_allowance()
        except Exception as exc:
            log.error("allowance read failed: %s", exc)
            self.allowance = None
            return self.snapshot(error_message(exc) or "Could not read allowance", error=True)
        return self.snapshot()

    async def refresh_allowance(self) -> AllowanceCheck | None:
        """Re-read the allowance against the selected package (display only)."""
        account = self.session.current_account()
        package = self.catalog.get(self.selected_id) if self.selected_id is not None else None
        if account is None or package is None:
            self.allowance = None
            return None
        self.allowance = await self.gate.check(account, self.sale.address, package.required_in)
        return self.allowance

    async def approve(self) -> ApprovalResult:
        account = self.session.current_account()
        if account is None:
            return ApprovalResult(
                success=False, error=ErrorKind.NOT_CONNECTED, message="Connect your wallet first",
            )
        result = await self.gate.approve(self.sale.address, account)
        await self._safe_refresh()
        return result

    async def buy(
        self,
        package_id: int | None = None,
        page_url: str | None = None,
        referrer: str | None = None,
    ) -> PurchaseResult:
        """Buy the selected (or given) package.

        The referrer comes from ``referrer`` if given, otherwise from the
        referral parameter of ``page_url`` (or the URL passed to connect).
        """
        target = package_id if package_id is not None else self.selected_id
        raw = referrer
        if raw is None:
            raw = self.resolver.raw_from_link(page_url or self._page_url)

        result = await self.orchestrator.purchase(target if target is not None else -1, raw)
        if result.success:
            await self._safe_refresh()
        return result

    async def _safe_refresh(self) -> AllowanceCheck | None:
        try:
            return await self.refresh_allowance()
        except Exception as exc:
            log.warning("allowance refresh failed: %s", exc)
            return self.allowance

    def referral_link(self, base_url: str | None = None) -> str | None:
        account = self.session.current_account()
        base = base_url or self._page_url
        if account is None or not base:
            return None
        return self.resolver.build_link(base, account)

    # ── Wallet notifications ──────────────────────────────

    async def on_accounts_changed(self, accounts: list[str]) -> ClientSnapshot:
        session = self.session.handle_accounts_changed(accounts)
        if not session.ready:
            self._clear_caches()
            return self.snapshot("Wallet disconnected")
        log.info("Now acting for %s", short_address(session.account))
        await self._safe_refresh()
        return self.snapshot("Account changed")

    def on_chain_changed(self, chain_id: object) -> ClientSnapshot:
        """Contract bindings are never migrated across chains; reconnect instead."""
        self.session.handle_chain_changed(chain_id)
        self._clear_caches()
        self.reload_required = True
        return self.snapshot("Network changed, reconnect required")

    def _clear_caches(self) -> None:
        self.catalog.clear()
        self.selected_id = None
        self.allowance = None
