"""Configuration models for the client."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class NativeCurrency:
    name: str = "BNB"
    symbol: str = "BNB"
    decimals: int = 18


@dataclass
class NetworkConfig:
    """Canonical descriptor of the chain the contracts live on."""

    chain_id: int = 56
    chain_name: str = "BNB Smart Chain"
    rpc_urls: list[str] = field(
        default_factory=lambda: ["https://bsc-dataseed.binance.org/"]
    )
    native_currency: NativeCurrency = field(default_factory=NativeCurrency)
    block_explorer_urls: list[str] = field(
        default_factory=lambda: ["https://bscscan.com"]
    )

    @property
    def chain_id_hex(self) -> str:
        return hex(self.chain_id)

    def to_add_chain_params(self) -> dict:
        """Parameter object for wallet_addEthereumChain (EIP-3085)."""
        return {
            "chainId": self.chain_id_hex,
            "chainName": self.chain_name,
            "rpcUrls": list(self.rpc_urls),
            "nativeCurrency": {
                "name": self.native_currency.name,
                "symbol": self.native_currency.symbol,
                "decimals": self.native_currency.decimals,
            },
            "blockExplorerUrls": list(self.block_explorer_urls),
        }


@dataclass
class ContractsConfig:
    sale: str = ""  # sale/stake contract (spender)
    settlement_token: str = ""  # USDT


@dataclass
class TokenConfig:
    """Display-only token metadata."""

    settlement_symbol: str = "USDT"
    settlement_decimals: int = 18
    stake_symbol: str = "MTEC"
    stake_decimals: int = 18


@dataclass
class ClientConfig:
    """Complete client configuration."""

    # Client
    log_level: str = "info"
    referral_param: str = "ref"
    receipt_timeout: int = 180  # seconds

    # Wallet
    wallet_url: str = "http://127.0.0.1:1248"  # EIP-1193 over HTTP (Frame)
    wallet_timeout: int = 120  # seconds, wallet prompts wait on the user
    account: str = ""  # preferred account when the wallet authorizes several

    network: NetworkConfig = field(default_factory=NetworkConfig)
    contracts: ContractsConfig = field(default_factory=ContractsConfig)
    tokens: TokenConfig = field(default_factory=TokenConfig)
