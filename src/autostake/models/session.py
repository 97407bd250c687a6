"""Wallet session state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from autostake.errors import ErrorKind


class SessionStatus(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    WRONG_NETWORK = "wrong_network"
    SWITCHING_NETWORK = "switching_network"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class SessionSnapshot:
    """Point-in-time view of the session.

    ``account`` is only ever set while ``status`` is READY.
    """

    status: SessionStatus = SessionStatus.DISCONNECTED
    account: str | None = None
    chain_id: int | None = None
    reason: ErrorKind | None = None
    message: str | None = None

    @property
    def ready(self) -> bool:
        return self.status == SessionStatus.READY
