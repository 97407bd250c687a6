"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from autostake.models.config import ClientConfig, NativeCurrency


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "AUTOSTAKE_",
) -> ClientConfig:
    """Load client configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (AUTOSTAKE_WALLET_URL, etc.)
        2. TOML config file
        3. Defaults from ClientConfig (BNB Smart Chain)
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = ClientConfig()

    # ── Client section ─────────────────────────────────────
    client = raw.get("client", {})
    if v := client.get("log_level"):
        cfg.log_level = str(v)
    if v := client.get("referral_param"):
        cfg.referral_param = str(v)
    if v := client.get("receipt_timeout"):
        cfg.receipt_timeout = int(v)

    # ── Wallet section ─────────────────────────────────────
    wallet = raw.get("wallet", {})
    if v := wallet.get("url"):
        cfg.wallet_url = str(v)
    if v := wallet.get("timeout"):
        cfg.wallet_timeout = int(v)
    if v := wallet.get("account"):
        cfg.account = str(v)

    # ── Network section ────────────────────────────────────
    network = raw.get("network", {})
    if v := network.get("chain_id"):
        cfg.network.chain_id = _chain_id(v)
    if v := network.get("chain_name"):
        cfg.network.chain_name = str(v)
    if v := network.get("rpc_urls"):
        cfg.network.rpc_urls = [str(u) for u in v]
    if v := network.get("block_explorer_urls"):
        cfg.network.block_explorer_urls = [str(u) for u in v]
    if currency := network.get("native_currency"):
        cfg.network.native_currency = NativeCurrency(
            name=currency.get("name", cfg.network.native_currency.name),
            symbol=currency.get("symbol", cfg.network.native_currency.symbol),
            decimals=int(currency.get("decimals", cfg.network.native_currency.decimals)),
        )

    # ── Contracts section ──────────────────────────────────
    contracts = raw.get("contracts", {})
    if v := contracts.get("sale"):
        cfg.contracts.sale = str(v)
    if v := contracts.get("settlement_token"):
        cfg.contracts.settlement_token = str(v)

    # ── Tokens section ─────────────────────────────────────
    tokens = raw.get("tokens", {})
    if v := tokens.get("settlement_symbol"):
        cfg.tokens.settlement_symbol = str(v)
    if (v := tokens.get("settlement_decimals")) is not None:
        cfg.tokens.settlement_decimals = int(v)
    if v := tokens.get("stake_symbol"):
        cfg.tokens.stake_symbol = str(v)
    if (v := tokens.get("stake_decimals")) is not None:
        cfg.tokens.stake_decimals = int(v)

    # ── Environment variable overrides (highest priority) ──
    if url := os.environ.get(f"{env_prefix}WALLET_URL"):
        cfg.wallet_url = url
    if sale := os.environ.get(f"{env_prefix}SALE_CONTRACT"):
        cfg.contracts.sale = sale
    if token := os.environ.get(f"{env_prefix}TOKEN"):
        cfg.contracts.settlement_token = token
    if chain := os.environ.get(f"{env_prefix}CHAIN_ID"):
        cfg.network.chain_id = _chain_id(chain)
    if account := os.environ.get(f"{env_prefix}ACCOUNT"):
        cfg.account = account

    return cfg


def _chain_id(value: object) -> int:
    """Accept 56, "56" or "0x38"."""
    if isinstance(value, str) and value.lower().startswith("0x"):
        return int(value, 16)
    return int(value)  # type: ignore[arg-type]
