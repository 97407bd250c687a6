"""Classification of wallet and node errors onto the flow taxonomy."""

from __future__ import annotations

import re
from typing import Any

from autostake.errors import ProviderRpcError

# EIP-1193 / EIP-3326 provider error codes
CODE_USER_REJECTED = 4001
CODE_UNRECOGNIZED_CHAIN = 4902

_REJECTION_RE = re.compile(r"user (rejected|denied|cancel)|rejected by (the )?user", re.I)
_UNRECOGNIZED_RE = re.compile(r"unrecognized chain", re.I)
_REVERT_PREFIX_RE = re.compile(r"^\s*(execution reverted:?|VM Exception while processing transaction: revert)\s*", re.I)


def _error_object(exc: BaseException) -> dict | None:
    """Dig the JSON-RPC error object out of whatever the library raised."""
    rpc_response = getattr(exc, "rpc_response", None)
    if isinstance(rpc_response, dict) and isinstance(rpc_response.get("error"), dict):
        return rpc_response["error"]
    if exc.args and isinstance(exc.args[0], dict):
        return exc.args[0]
    return None


def error_code(exc: BaseException) -> int | None:
    """EIP-1193 error code, including codes nested in ``data.originalError``."""
    if isinstance(exc, ProviderRpcError):
        code, data = exc.code, exc.data
    else:
        obj = _error_object(exc) or {}
        code, data = obj.get("code"), obj.get("data")
    if isinstance(data, dict):
        original = data.get("originalError")
        if isinstance(original, dict) and original.get("code") is not None:
            return _as_int(original["code"])
    return _as_int(code)


def _as_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def error_message(exc: BaseException) -> str:
    """Best human-readable message: ``data.message`` first, then the message."""
    if isinstance(exc, ProviderRpcError):
        data, message = exc.data, exc.message
    else:
        obj = _error_object(exc)
        if obj is not None:
            data, message = obj.get("data"), obj.get("message")
        else:
            data, message = None, getattr(exc, "message", None) or str(exc)
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return str(message or "")


def is_user_rejection(exc: BaseException) -> bool:
    if error_code(exc) == CODE_USER_REJECTED:
        return True
    return bool(_REJECTION_RE.search(error_message(exc)))


def is_unrecognized_chain(exc: BaseException) -> bool:
    if error_code(exc) == CODE_UNRECOGNIZED_CHAIN:
        return True
    return bool(_UNRECOGNIZED_RE.search(error_message(exc)))


def revert_reason(message: str | None) -> str | None:
    """Strip the node's revert prefix. None if no reason string remains."""
    if not message:
        return None
    reason = _REVERT_PREFIX_RE.sub("", str(message), count=1).strip()
    return reason or None
