"""Referral resolver - referrer address from the page link."""

from __future__ import annotations

import logging

import httpx

from autostake.address import is_valid_address, same_address, to_checksum
from autostake.models.records import ZERO_ADDRESS, ReferralCandidate

log = logging.getLogger(__name__)

DEFAULT_PARAM = "ref"


class ReferralResolver:
    """Pure transforms between page URLs and referrer addresses.

    A missing, malformed or self-referencing referrer is not an error; it
    resolves to the zero address, which the contract reads as "no referrer".
    """

    def __init__(self, param: str = DEFAULT_PARAM) -> None:
        self.param = param

    def raw_from_link(self, url: str | None) -> str:
        if not url:
            return ""
        try:
            return httpx.URL(url).params.get(self.param) or ""
        except (httpx.InvalidURL, TypeError, ValueError):
            return ""

    def from_link(self, url: str | None) -> str:
        """Checksummed referrer carried by ``url``, or the zero address."""
        raw = self.raw_from_link(url)
        if not is_valid_address(raw):
            return ZERO_ADDRESS
        return to_checksum(raw)

    def resolve(self, candidate_raw: str | None, connecting_account: str | None) -> str:
        if not is_valid_address(candidate_raw):
            return ZERO_ADDRESS
        resolved = to_checksum(candidate_raw)
        if same_address(resolved, connecting_account):
            log.info("Self-referral ignored")
            return ZERO_ADDRESS
        return resolved

    def candidate(self, url: str | None, connecting_account: str | None) -> ReferralCandidate:
        raw = self.raw_from_link(url)
        return ReferralCandidate(raw=raw, resolved=self.resolve(raw, connecting_account))

    def build_link(self, base_url: str, account: str) -> str:
        """``base_url`` with the referral parameter set to ``account``."""
        return str(httpx.URL(base_url).copy_set_param(self.param, to_checksum(account)))
