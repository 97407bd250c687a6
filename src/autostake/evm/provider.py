"""EIP-1193 wallet provider spoken as JSON-RPC over HTTP."""

from __future__ import annotations

import itertools
import logging
from typing import Any

import httpx

from autostake.errors import NoProviderError, ProviderRpcError

log = logging.getLogger(__name__)


class HttpWalletProvider:
    """Forwards EIP-1193 requests to a wallet's local HTTP endpoint.

    Desktop wallets such as Frame expose the same request surface a browser
    extension injects (eth_requestAccounts, wallet_switchEthereumChain, ...)
    on a local JSON-RPC port. Signing prompts block until the user answers,
    so the timeout should be generous.
    """

    def __init__(
        self,
        url: str = "http://127.0.0.1:1248",
        timeout: int = 120,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self._timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout, connect=5),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, params: list | None = None) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params if params is not None else [],
        }
        log.debug("wallet request %s", method)

        try:
            resp = await self._get_client().post(self.url, json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.ConnectError as exc:
            raise NoProviderError(f"No wallet reachable at {self.url}: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderRpcError(
                None, f"wallet HTTP {exc.response.status_code}",
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderRpcError(None, f"wallet request failed: {exc}") from exc

        error = body.get("error")
        if error:
            raise ProviderRpcError(
                error.get("code"), str(error.get("message", "")), error.get("data"),
            )
        return body.get("result")
