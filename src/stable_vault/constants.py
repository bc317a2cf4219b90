"""Chain addresses and policy constants."""

from typing import Optional, TypedDict


class NetworkAddresses(TypedDict):
    STABLE: Optional[str]
    VOLATILE: Optional[str]
    PRICE_FEED: Optional[str]
    SWAP_ROUTER: Optional[str]
    QUOTER: Optional[str]


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# DAI / WETH, Chainlink ETH/USD
MAINNET_ADDRESSES: NetworkAddresses = {
    "STABLE": "0x6B175474E89094C44Da98b954EedeAC495271d0F",
    "VOLATILE": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
    "PRICE_FEED": "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419",
    # No default router on mainnet; the operator supplies swap_router_address
    "SWAP_ROUTER": None,
    "QUOTER": "0xb27308f9F90D607463bb33eA1BeBb41C27CE5AB6",
}

SEPOLIA_ADDRESSES: NetworkAddresses = {
    "STABLE": None,
    "VOLATILE": None,
    "PRICE_FEED": None,
    "SWAP_ROUTER": "0x3bFA4769FB09eefC5a80d6E87c3B9C650f7Ae48E",
    "QUOTER": "0xEd1f6473345F45b75F8179591dd5bA1888cf2FB3",
}

DEFAULT_MAINNET_RPC_URL = "https://eth.drpc.org"
DEFAULT_SEPOLIA_RPC_URL = "https://sepolia.drpc.org"

# Valuation arithmetic runs on 18-decimal prices
PRICE_SCALE = 10**18
PERCENT_DENOMINATOR = 100
BPS_DENOMINATOR = 10_000

VAULT_VERSION = 1

DEFAULT_POOL_FEE = 3000  # 0.3% tier
DEFAULT_TRADE_DEADLINE_SECONDS = 5 * 60
DEFAULT_QUOTE_PROBE_AMOUNT = 10**18
DEFAULT_DIVIDEND_INTERVAL_SECONDS = 30 * 24 * 60 * 60
DEFAULT_TX_RECEIPT_TIMEOUT = 120.0
