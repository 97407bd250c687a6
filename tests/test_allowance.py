"""Allowance gate checks and max approval."""

from __future__ import annotations

import pytest

from autostake.errors import ErrorKind
from autostake.models.records import MAX_UINT256, AllowanceStatus

from tests.factories import ACCOUNT, SALE_ADDRESS


@pytest.mark.parametrize(
    "allowance, required, expected",
    [
        (99, 100, AllowanceStatus.INSUFFICIENT),
        (100, 100, AllowanceStatus.SUFFICIENT),
        (101, 100, AllowanceStatus.SUFFICIENT),
        (0, 0, AllowanceStatus.SUFFICIENT),
        (MAX_UINT256 - 1, MAX_UINT256, AllowanceStatus.INSUFFICIENT),
    ],
)
async def test_check_boundary(gate, token, allowance, required, expected):
    token.set_allowance(ACCOUNT, SALE_ADDRESS, allowance)

    check = await gate.check(ACCOUNT, SALE_ADDRESS, required)

    assert check.status == expected
    assert check.state.amount == allowance
    assert check.required == required


async def test_check_always_rereads(gate, token):
    await gate.check(ACCOUNT, SALE_ADDRESS, 100)
    token.set_allowance(ACCOUNT, SALE_ADDRESS, 100)
    check = await gate.check(ACCOUNT, SALE_ADDRESS, 100)

    assert check.sufficient
    assert len(token.allowance_calls) == 2


async def test_approve_requests_max_uint(gate, token):
    result = await gate.approve(SALE_ADDRESS, ACCOUNT)

    assert result.success
    assert token.approve_calls == [(SALE_ADDRESS, MAX_UINT256, ACCOUNT)]
    assert result.block_number == 1234
    assert result.tx_hash == "0xapprove0001"
    # Allowance re-read after the approval, not assumed
    assert result.allowance.amount == MAX_UINT256
    assert token.allowance_calls[-1] == (ACCOUNT, SALE_ADDRESS)


async def test_approve_rejected_in_wallet(gate, token):
    token.reject = True

    result = await gate.approve(SALE_ADDRESS, ACCOUNT)

    assert not result.success
    assert result.error == ErrorKind.APPROVAL_FAILED
    assert "User denied" in result.message
    assert result.allowance.amount == 0


async def test_approve_revert_surfaces_reason(gate, token):
    token.revert_reason = "ERC20: approve from the zero address"

    result = await gate.approve(SALE_ADDRESS, ACCOUNT)

    assert not result.success
    assert result.error == ErrorKind.APPROVAL_FAILED
    assert result.message == "ERC20: approve from the zero address"
    assert result.tx_hash == "0xapprove0001"


async def test_approve_revert_without_reason(gate, token):
    token.reverts = True
    result = await gate.approve(SALE_ADDRESS, ACCOUNT)
    assert result.message == "Approval failed"


async def test_approve_blocked_while_write_in_flight(gate, token, guard):
    async with guard.hold(ACCOUNT, "purchase"):
        result = await gate.approve(SALE_ADDRESS, ACCOUNT)

    assert not result.success
    assert result.error == ErrorKind.WRITE_IN_FLIGHT
    assert token.approve_calls == []


async def test_approve_receipt_timeout(gate, token):
    token.stalls = True

    result = await gate.approve(SALE_ADDRESS, ACCOUNT)

    assert not result.success
    assert result.error == ErrorKind.APPROVAL_FAILED
    assert "still pending" in result.message
    assert result.tx_hash == "0xapprove0001"
