"""Fixed ABIs for the settlement token and the sale/stake contract."""

from __future__ import annotations

ERC20_ABI = [
    {
        "name": "allowance",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "spender", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "approve",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
]

SALE_ABI = [
    {
        "name": "packageCount",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "packages",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "", "type": "uint256"}],
        "outputs": [
            {"name": "usdtIn", "type": "uint256"},
            {"name": "mtecOut", "type": "uint256"},
            {"name": "active", "type": "bool"},
        ],
    },
    {
        "name": "buyPackage",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "packageId", "type": "uint256"},
            {"name": "referrer", "type": "address"},
        ],
        "outputs": [],
    },
]
