"""
Configuration for Liquid smart account operations
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

# Network constants (Base mainnet)
BASE_CHAIN_ID = 8453
ENTRY_POINT_V06 = "0x5FF137D4b0FDCD49DcA30c7CF57E578a026d2789"
COINBASE_WALLET_FACTORY_ADDRESS = "0x0BA5ED0c6AA8c49038F819E587E2633c4A9F428a"
CONNECTOR_PLUGIN_ADDRESS = "0x2f9a3fb2D6666A062148784DC04bC9273E017366"
AERODROME_CONNECTOR_ADDRESS = "0xaab8909B149Dd3e0DAcd2e46E846EAe75070EF47"
AERODROME_FACTORY_ADDRESS = "0x420DD381b31aEf6683db6B902084cB0FFECe40Da"
AERODROME_ROUTER_ADDRESS = "0xcF77a3Ba9A5CA399B7c97c74d54e5b1Beb874E43"
WETH_ADDRESS = "0x4200000000000000000000000000000000000006"
USDC_ADDRESS = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Slippage and deadline applied to swap/liquidity actions
DEFAULT_SLIPPAGE_BPS = 20  # 0.20%
DEFAULT_DEADLINE_SECONDS = 20 * 60

# Deployment estimates are unreliable, never go below this
MIN_DEPLOYMENT_VERIFICATION_GAS = 800000

DEFAULT_ACCOUNT_SALT = 10**18

DEFAULT_TOKENS = [
    {"address": WETH_ADDRESS, "symbol": "WETH", "decimals": 18},
    {"address": USDC_ADDRESS, "symbol": "USDC", "decimals": 6},
]


@dataclass(frozen=True)
class ContractAddresses:
    """Deployed contract addresses the SDK talks to"""

    entry_point: str = ENTRY_POINT_V06
    account_factory: str = COINBASE_WALLET_FACTORY_ADDRESS
    connector_plugin: str = CONNECTOR_PLUGIN_ADDRESS
    aerodrome_connector: str = AERODROME_CONNECTOR_ADDRESS
    aerodrome_factory: str = AERODROME_FACTORY_ADDRESS
    aerodrome_router: str = AERODROME_ROUTER_ADDRESS
    weth: str = WETH_ADDRESS


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    return float(value) if value else default


@dataclass
class SDKConfig:
    """Configuration for Liquid SDK operations"""

    # Network configuration
    rpc_url: str = field(default_factory=lambda: os.environ.get("LIQUID_RPC_URL", "https://mainnet.base.org"))
    chain_id: int = field(default_factory=lambda: int(os.environ.get("LIQUID_CHAIN_ID", str(BASE_CHAIN_ID))))
    addresses: ContractAddresses = field(default_factory=ContractAddresses)

    # Backend (passkey registration / authentication)
    api_base_url: str = field(default_factory=lambda: os.environ.get("LIQUID_API_URL", ""))
    api_key: str = field(default_factory=lambda: os.environ.get("LIQUID_API_KEY", ""))

    # Submission: a bundler URL switches to bundler mode, otherwise a relayer
    # key submits handleOps directly to the entry point
    bundler_url: Optional[str] = field(default_factory=lambda: os.environ.get("LIQUID_BUNDLER_URL") or None)
    relayer_private_key: Optional[str] = field(default_factory=lambda: os.environ.get("LIQUID_RELAYER_KEY") or None)

    # Strategy parameters
    slippage_bps: int = DEFAULT_SLIPPAGE_BPS
    deadline_seconds: int = DEFAULT_DEADLINE_SECONDS
    account_salt: int = DEFAULT_ACCOUNT_SALT

    # Timeouts (seconds)
    request_timeout: float = field(default_factory=lambda: _env_float("LIQUID_REQUEST_TIMEOUT", 30.0))
    receipt_timeout: float = field(default_factory=lambda: _env_float("LIQUID_RECEIPT_TIMEOUT", 120.0))
    receipt_poll_interval: float = 2.0

    token_list: List[dict] = field(default_factory=lambda: list(DEFAULT_TOKENS))

    def __post_init__(self):
        if not 0 <= self.slippage_bps < 10000:
            raise ValueError(f"slippage_bps must be in [0, 10000), got {self.slippage_bps}")
        if self.deadline_seconds <= 0:
            raise ValueError("deadline_seconds must be positive")

    @property
    def mode(self) -> str:
        return "bundler" if self.bundler_url else "direct"
