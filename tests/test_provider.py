"""HttpWalletProvider against an in-process httpx transport."""

from __future__ import annotations

import json

import httpx
import pytest

from autostake.errors import NoProviderError, ProviderRpcError
from autostake.evm.errors import is_unrecognized_chain, is_user_rejection
from autostake.evm.provider import HttpWalletProvider


def _provider(handler) -> HttpWalletProvider:
    return HttpWalletProvider("http://wallet.test", timeout=5, transport=httpx.MockTransport(handler))


async def test_result_returned_and_payload_shaped():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        seen.append(body)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": "0x38"})

    provider = _provider(handler)
    assert await provider.request("eth_chainId") == "0x38"
    await provider.request("eth_accounts")
    await provider.close()

    assert seen[0] == {"jsonrpc": "2.0", "id": 1, "method": "eth_chainId", "params": []}
    assert seen[1]["id"] == 2


async def test_error_object_becomes_rpc_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={
            "jsonrpc": "2.0", "id": 1,
            "error": {"code": 4001, "message": "User rejected the request."},
        })

    provider = _provider(handler)
    with pytest.raises(ProviderRpcError) as info:
        await provider.request("eth_requestAccounts")

    assert info.value.code == 4001
    assert is_user_rejection(info.value)
    assert str(info.value) == "[4001] User rejected the request."


async def test_nested_original_error_code():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={
            "jsonrpc": "2.0", "id": 1,
            "error": {
                "code": -32603,
                "message": "Internal JSON-RPC error.",
                "data": {"originalError": {"code": 4902}},
            },
        })

    provider = _provider(handler)
    with pytest.raises(ProviderRpcError) as info:
        await provider.request("wallet_switchEthereumChain", [{"chainId": "0x38"}])

    assert is_unrecognized_chain(info.value)


async def test_unreachable_wallet_is_no_provider():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NoProviderError):
        await _provider(handler).request("eth_requestAccounts")


async def test_http_status_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    with pytest.raises(ProviderRpcError) as info:
        await _provider(handler).request("eth_chainId")

    assert info.value.code is None
    assert "502" in info.value.message


async def test_non_json_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    with pytest.raises(ProviderRpcError):
        await _provider(handler).request("eth_chainId")
