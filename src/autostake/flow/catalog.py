"""Package catalog - fixed-index package list read from the sale contract."""

from __future__ import annotations

import logging

from autostake.errors import ErrorKind
from autostake.interfaces.contracts import SaleContract
from autostake.models.records import CatalogSnapshot, Package

log = logging.getLogger(__name__)


class PackageCatalog:
    """Caches the packages of one session, keyed by contract index.

    Contents never change within a session. A reconnect calls ``load`` again
    and replaces everything.
    """

    def __init__(self) -> None:
        self._snapshot = CatalogSnapshot()
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def packages(self) -> tuple[Package, ...]:
        return self._snapshot.packages

    @property
    def condition(self) -> ErrorKind | None:
        return self._snapshot.condition

    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    async def load(self, contract: SaleContract) -> CatalogSnapshot:
        """Read packageCount() then packages(0..n-1) in index order."""
        self.clear()
        count = await contract.package_count()
        log.info("Loading %d packages from %s", count, contract.address)

        if count == 0:
            self._snapshot = CatalogSnapshot(condition=ErrorKind.NO_PACKAGES_AVAILABLE)
            self._loaded = True
            log.warning("Sale contract exposes no packages")
            return self._snapshot

        packages = []
        for index in range(count):
            required_in, mint_out, active = await contract.packages(index)
            packages.append(
                Package(id=index, required_in=required_in, mint_out=mint_out, active=active)
            )

        self._snapshot = CatalogSnapshot(packages=tuple(packages))
        self._loaded = True
        return self._snapshot

    def clear(self) -> None:
        self._snapshot = CatalogSnapshot()
        self._loaded = False

    def select_default(self) -> Package | None:
        """First active package, else index 0. None only for an empty catalog."""
        for pkg in self._snapshot.packages:
            if pkg.active:
                return pkg
        return self.get(0)

    def get(self, package_id: object) -> Package | None:
        if isinstance(package_id, bool) or not isinstance(package_id, int):
            return None
        if 0 <= package_id < len(self._snapshot.packages):
            return self._snapshot.packages[package_id]
        return None
