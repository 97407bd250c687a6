"""WalletProvider protocol - EIP-1193 request interface."""

from __future__ import annotations

from typing import Any, Protocol


class WalletProvider(Protocol):
    """An injected-wallet style provider.

    Failures raise ProviderRpcError (or a subclass) carrying the EIP-1193
    error code when the wallet supplies one.
    """

    async def request(self, method: str, params: list | None = None) -> Any:
        """Send a single JSON-RPC request to the wallet."""
        ...
