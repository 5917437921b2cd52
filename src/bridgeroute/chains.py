"""Static chain, token and route tables.

This is the single hand-maintained source of fallback data. The chain
registry uses it when the aggregator's chain listing cannot be fetched,
and the fallback provider uses it to answer "which tokens can move between
these two chains" when live token lookups fail. Nothing here is ever used
to fabricate a quote.
"""

from dataclasses import dataclass
from itertools import permutations
from typing import Optional

from bridgeroute.errors import RegistryConfigError

# Sentinel address the aggregator uses for a chain's native currency
NATIVE_TOKEN_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"


def is_native_token(address: str) -> bool:
    """Check if address is the native currency sentinel."""
    return address.lower() == NATIVE_TOKEN_ADDRESS.lower()


@dataclass(frozen=True)
class ChainDescriptor:
    """A chain the aggregator can bridge to or from."""

    key: str  # stable identifier, e.g. "arbitrum"
    chain_id: int
    name: str
    native_symbol: str
    native_decimals: int = 18
    chain_type: str = "evm"


@dataclass(frozen=True)
class TokenDescriptor:
    """A token on a specific chain."""

    chain_key: str
    address: str
    decimals: int
    symbol: str
    is_bridgeable: bool = True
    price_usd: Optional[float] = None
    name: Optional[str] = None

    @property
    def is_native(self) -> bool:
        return is_native_token(self.address)


@dataclass(frozen=True)
class KnownRoute:
    """A route that has been confirmed to work at some point."""

    symbol: str
    src_chain_key: str
    dst_chain_key: str
    src_address: str
    dst_address: str


# ======================
# Chains
# ======================

FALLBACK_CHAINS: tuple[ChainDescriptor, ...] = (
    ChainDescriptor(key="ethereum", chain_id=1, name="Ethereum", native_symbol="ETH"),
    ChainDescriptor(key="polygon", chain_id=137, name="Polygon", native_symbol="MATIC"),
    ChainDescriptor(key="arbitrum", chain_id=42161, name="Arbitrum", native_symbol="ETH"),
    ChainDescriptor(key="base", chain_id=8453, name="Base", native_symbol="ETH"),
    ChainDescriptor(key="bsc", chain_id=56, name="BNB Chain", native_symbol="BNB"),
    ChainDescriptor(key="somnia", chain_id=50311, name="Somnia", native_symbol="SOMI"),
)


# ======================
# Tokens
# ======================

def _tokens(chain_key: str, *rows: tuple) -> tuple[TokenDescriptor, ...]:
    # rows: (symbol, address, decimals, is_bridgeable)
    return tuple(
        TokenDescriptor(
            chain_key=chain_key,
            address=address,
            decimals=decimals,
            symbol=symbol,
            is_bridgeable=bridgeable,
        )
        for symbol, address, decimals, bridgeable in rows
    )


TOKENS: dict[str, tuple[TokenDescriptor, ...]] = {
    "ethereum": _tokens(
        "ethereum",
        ("ETH", NATIVE_TOKEN_ADDRESS, 18, True),
        ("USDC", "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", 6, True),
        ("USDT", "0xdAC17F958D2ee523a2206206994597C13D831ec7", 6, True),
        ("WETH", "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2", 18, True),
        ("WBTC", "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599", 8, True),
    ),
    "polygon": _tokens(
        "polygon",
        ("MATIC", NATIVE_TOKEN_ADDRESS, 18, False),
        ("USDC", "0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359", 6, True),
        ("USDT", "0xc2132D05D31c914a87C6611C10748AEb04B58e8F", 6, True),
        ("WETH", "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619", 18, True),
    ),
    "arbitrum": _tokens(
        "arbitrum",
        ("ETH", NATIVE_TOKEN_ADDRESS, 18, True),
        ("USDC", "0xaf88d065e77c8cC2239327C5EDb3A432268e5831", 6, True),
        ("USDT", "0xFd086bC7CD5C481DCC9C85ebE478A1C0b69FCbb9", 6, True),
        ("WETH", "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1", 18, True),
    ),
    "base": _tokens(
        "base",
        ("ETH", NATIVE_TOKEN_ADDRESS, 18, True),
        ("USDC", "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913", 6, True),
        ("USDbC", "0xd9aAEc86B65D86f6A7B5B1b0c42FFA531710b6CA", 6, True),
    ),
    "bsc": _tokens(
        "bsc",
        ("BNB", NATIVE_TOKEN_ADDRESS, 18, False),
        ("USDC", "0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d", 18, True),
        ("USDT", "0x55d398326f99059fF775485246999027B3197955", 18, True),
        ("ETH", "0x2170Ed0880ac9A755fd29B2688956BD959F933F8", 18, True),
    ),
    "somnia": _tokens(
        "somnia",
        ("SOMI", NATIVE_TOKEN_ADDRESS, 18, False),
        ("WETH", "0x936Ab8C674bcb567CD5dEB85D8A216494704E9D8", 18, True),
        ("USDC.e", "0x28BEc7E30E6faee657a03e19Bf1128AaD7632A00", 6, True),
        ("USDT", "0x67B302E35Aef5EEE8c32D934F5856869EF428330", 6, True),
    ),
}


# ======================
# Known-good routes
# ======================
# symbol -> {chain_key: token address}; every ordered pair of chains listed
# under a symbol is a known route.

BRIDGE_TOKEN_ADDRESSES: dict[str, dict[str, str]] = {
    "USDC": {
        "somnia": "0x28BEc7E30E6faee657a03e19Bf1128AaD7632A00",
        "ethereum": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
        "bsc": "0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d",
        "base": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
    },
    "USDT": {
        "somnia": "0x67B302E35Aef5EEE8c32D934F5856869EF428330",
        "ethereum": "0xdAC17F958D2ee523a2206206994597C13D831ec7",
        "bsc": "0x55d398326f99059fF775485246999027B3197955",
        "arbitrum": "0xFd086bC7CD5C481DCC9C85ebE478A1C0b69FCbb9",
    },
    "WETH": {
        "somnia": "0x936Ab8C674bcb567CD5dEB85D8A216494704E9D8",
        "ethereum": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
        "bsc": "0x2170Ed0880ac9A755fd29B2688956BD959F933F8",
        "base": NATIVE_TOKEN_ADDRESS,
    },
}


def _build_known_routes() -> tuple[KnownRoute, ...]:
    routes = []
    for symbol, addresses in BRIDGE_TOKEN_ADDRESSES.items():
        for src, dst in permutations(addresses, 2):
            routes.append(
                KnownRoute(
                    symbol=symbol,
                    src_chain_key=src,
                    dst_chain_key=dst,
                    src_address=addresses[src],
                    dst_address=addresses[dst],
                )
            )
    return tuple(routes)


KNOWN_ROUTES: tuple[KnownRoute, ...] = _build_known_routes()


# ======================
# Helper Functions
# ======================

def get_fallback_chain(key: str) -> Optional[ChainDescriptor]:
    """Get a fallback chain descriptor by key."""
    for chain in FALLBACK_CHAINS:
        if chain.key == key:
            return chain
    return None


def get_static_tokens(chain_key: str) -> tuple[TokenDescriptor, ...]:
    """Get the static token table for a chain (empty if unknown)."""
    return TOKENS.get(chain_key, ())


def validate_static_config() -> None:
    """Check the static tables are usable.

    Raises:
        RegistryConfigError: if the tables are empty or reference unknown chains
    """
    if not FALLBACK_CHAINS:
        raise RegistryConfigError("No fallback chains configured")

    keys = [chain.key for chain in FALLBACK_CHAINS]
    if len(set(keys)) != len(keys):
        raise RegistryConfigError(f"Duplicate fallback chain keys: {keys}")

    for chain_key, tokens in TOKENS.items():
        if chain_key not in keys:
            raise RegistryConfigError(f"Token table for unknown chain '{chain_key}'")
        for token in tokens:
            if token.chain_key != chain_key:
                raise RegistryConfigError(
                    f"Token {token.symbol} listed under '{chain_key}' but belongs to '{token.chain_key}'"
                )

    for route in KNOWN_ROUTES:
        for chain_key in (route.src_chain_key, route.dst_chain_key):
            if chain_key not in keys:
                raise RegistryConfigError(
                    f"Known route {route.symbol} references unknown chain '{chain_key}'"
                )


validate_static_config()
