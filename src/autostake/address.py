"""Address helpers shared by the flow components."""

from __future__ import annotations

from web3 import Web3

from autostake.models.records import ZERO_ADDRESS


def is_valid_address(value: object) -> bool:
    """True for a hex address string; mixed case must carry a valid checksum."""
    if not isinstance(value, str) or not value or not Web3.is_address(value):
        return False
    body = value[2:] if value[:2].lower() == "0x" else value
    if body != body.lower() and body != body.upper():
        return Web3.is_checksum_address(value)
    return True


def to_checksum(value: str) -> str:
    return Web3.to_checksum_address(value)


def same_address(a: str | None, b: str | None) -> bool:
    if not a or not b:
        return False
    return a.lower() == b.lower()


def short_address(value: str | None) -> str:
    if not value:
        return "-"
    return f"{value[:6]}...{value[-4:]}"


def is_zero(value: str | None) -> bool:
    return same_address(value, ZERO_ADDRESS)
