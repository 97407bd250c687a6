"""Config loading from TOML and environment."""

from __future__ import annotations

import pytest

from autostake.config import load_config

TOML = """
[client]
log_level = "DEBUG"
referral_param = "invite"
receipt_timeout = 60

[wallet]
url = "http://127.0.0.1:9999"
timeout = 30
account = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"

[network]
chain_id = "0x61"
chain_name = "BNB Smart Chain Testnet"
rpc_urls = ["https://data-seed-prebsc-1-s1.binance.org:8545/"]
block_explorer_urls = ["https://testnet.bscscan.com"]

[network.native_currency]
name = "tBNB"
symbol = "tBNB"

[contracts]
sale = "0xcccccccccccccccccccccccccccccccccccccccc"
settlement_token = "0x5555555555555555555555555555555555555555"

[tokens]
settlement_symbol = "USDC"
settlement_decimals = 6
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("WALLET_URL", "SALE_CONTRACT", "TOKEN", "CHAIN_ID", "ACCOUNT"):
        monkeypatch.delenv(f"AUTOSTAKE_{name}", raising=False)


def test_defaults_target_bsc():
    cfg = load_config()

    assert cfg.network.chain_id == 56
    assert cfg.network.chain_id_hex == "0x38"
    assert cfg.wallet_url == "http://127.0.0.1:1248"
    assert cfg.referral_param == "ref"
    assert cfg.contracts.sale == ""


def test_missing_file_uses_defaults(tmp_path):
    cfg = load_config(tmp_path / "nope.toml")
    assert cfg.network.chain_id == 56


def test_toml_sections(tmp_path):
    path = tmp_path / "autostake.toml"
    path.write_text(TOML)

    cfg = load_config(path)

    assert cfg.log_level == "DEBUG"
    assert cfg.referral_param == "invite"
    assert cfg.receipt_timeout == 60
    assert cfg.wallet_url == "http://127.0.0.1:9999"
    assert cfg.wallet_timeout == 30
    assert cfg.account == "0x" + "aa" * 20
    assert cfg.network.chain_id == 97
    assert cfg.network.chain_name == "BNB Smart Chain Testnet"
    assert cfg.network.native_currency.symbol == "tBNB"
    assert cfg.network.native_currency.decimals == 18
    assert cfg.contracts.sale == "0x" + "cc" * 20
    assert cfg.tokens.settlement_symbol == "USDC"
    assert cfg.tokens.settlement_decimals == 6
    assert cfg.tokens.stake_symbol == "MTEC"


def test_add_chain_params(tmp_path):
    path = tmp_path / "autostake.toml"
    path.write_text(TOML)

    params = load_config(path).network.to_add_chain_params()

    assert params["chainId"] == "0x61"
    assert params["chainName"] == "BNB Smart Chain Testnet"
    assert params["nativeCurrency"] == {"name": "tBNB", "symbol": "tBNB", "decimals": 18}
    assert params["rpcUrls"] == ["https://data-seed-prebsc-1-s1.binance.org:8545/"]


def test_env_overrides_toml(tmp_path, monkeypatch):
    path = tmp_path / "autostake.toml"
    path.write_text(TOML)
    monkeypatch.setenv("AUTOSTAKE_WALLET_URL", "http://wallet.local:1248")
    monkeypatch.setenv("AUTOSTAKE_SALE_CONTRACT", "0x" + "dd" * 20)
    monkeypatch.setenv("AUTOSTAKE_TOKEN", "0x" + "ee" * 20)
    monkeypatch.setenv("AUTOSTAKE_CHAIN_ID", "56")
    monkeypatch.setenv("AUTOSTAKE_ACCOUNT", "0x" + "bb" * 20)

    cfg = load_config(path)

    assert cfg.wallet_url == "http://wallet.local:1248"
    assert cfg.contracts.sale == "0x" + "dd" * 20
    assert cfg.contracts.settlement_token == "0x" + "ee" * 20
    assert cfg.network.chain_id == 56
    assert cfg.account == "0x" + "bb" * 20


def test_custom_env_prefix(monkeypatch):
    monkeypatch.setenv("MTEC_CHAIN_ID", "0x61")
    cfg = load_config(env_prefix="MTEC_")
    assert cfg.network.chain_id == 97
