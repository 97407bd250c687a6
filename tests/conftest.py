"""Shared fixtures for autostake tests."""

from __future__ import annotations

import pytest
from pytest_metadata.plugin import metadata_key

from autostake.client import AutoStakeClient
from autostake.flow.allowance import AllowanceGate
from autostake.flow.catalog import PackageCatalog
from autostake.flow.guard import WriteGuard
from autostake.flow.purchase import PurchaseOrchestrator
from autostake.flow.referral import ReferralResolver
from autostake.flow.session import ChainSession
from autostake.models.config import ClientConfig, ContractsConfig, NetworkConfig

from tests.factories import ACCOUNT, SALE_ADDRESS, TOKEN_ADDRESS, make_package_rows
from tests.mocks import MockSale, MockToken, MockWallet

BSC_CHAIN_ID = 56


def pytest_configure(config):
    """Add network info to the HTML report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Network"] = "BNB Smart Chain (mocked)"
    meta["Sale Contract"] = SALE_ADDRESS
    meta["Settlement Token"] = TOKEN_ADDRESS


def make_test_config(**overrides) -> ClientConfig:
    """Build a ClientConfig suitable for testing."""
    defaults = dict(
        wallet_url="http://127.0.0.1:1248",
        wallet_timeout=5,
        receipt_timeout=5,
        network=NetworkConfig(chain_id=BSC_CHAIN_ID),
        contracts=ContractsConfig(sale=SALE_ADDRESS, settlement_token=TOKEN_ADDRESS),
    )
    defaults.update(overrides)
    return ClientConfig(**defaults)


@pytest.fixture
def test_config():
    return make_test_config()


@pytest.fixture
def wallet():
    return MockWallet(accounts=[ACCOUNT], chain_id=BSC_CHAIN_ID)


@pytest.fixture
def token():
    return MockToken(address=TOKEN_ADDRESS)


@pytest.fixture
def sale(token):
    return MockSale(packages=make_package_rows(), address=SALE_ADDRESS, token=token)


@pytest.fixture
def guard():
    return WriteGuard()


@pytest.fixture
def session(wallet, test_config):
    return ChainSession(wallet, test_config.network)


@pytest.fixture
def catalog():
    return PackageCatalog()


@pytest.fixture
def gate(token, guard):
    return AllowanceGate(token, guard)


@pytest.fixture
def resolver():
    return ReferralResolver()


@pytest.fixture
async def ready_session(session):
    snap = await session.connect()
    assert snap.ready
    return session


@pytest.fixture
async def loaded_catalog(catalog, sale):
    await catalog.load(sale)
    return catalog


@pytest.fixture
def orchestrator(ready_session, loaded_catalog, gate, resolver, sale, guard):
    return PurchaseOrchestrator(ready_session, loaded_catalog, gate, resolver, sale, guard)


@pytest.fixture
def client(test_config, wallet, token, sale):
    """Fully wired AutoStakeClient with mocked wallet and contracts."""
    return AutoStakeClient(test_config, wallet, token, sale)
