"""Single-slot write guard - at most one outstanding wallet write per account."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from autostake.errors import WriteInFlightError

log = logging.getLogger(__name__)


class WriteGuard:
    """Tracks which accounts have an approve/purchase prompt outstanding.

    Entering a held slot fails immediately, it never queues.
    """

    def __init__(self) -> None:
        self._held: dict[str, str] = {}  # lowercased account -> action

    def busy(self, account: str | None = None) -> bool:
        if account is None:
            return bool(self._held)
        return account.lower() in self._held

    @asynccontextmanager
    async def hold(self, account: str, action: str) -> AsyncIterator[None]:
        key = account.lower()
        if key in self._held:
            raise WriteInFlightError(
                f"{self._held[key]} still in progress, wait for it to finish"
            )
        self._held[key] = action
        log.debug("write slot taken by %s", action)
        try:
            yield
        finally:
            del self._held[key]
