"""Chain and token registry.

On first use the registry asks the aggregator for its chain listing. If
that fails for any reason it settles on the static fallback chains instead;
the choice is made once and kept as either a ``LiveCatalog`` or a
``StaticCatalog`` until ``reload()`` is called. An unsupported chain is a
normal answer (``is_supported`` returns False), not an error.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

from bridgeroute import chains as static
from bridgeroute.chains import ChainDescriptor, TokenDescriptor, is_native_token
from bridgeroute.errors import BridgeError, ProviderDataError
from bridgeroute.routing.base import BridgePair
from bridgeroute.routing.client import StargateClient
from bridgeroute.routing.fallback import FallbackProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiveCatalog:
    """Chains as reported by the aggregator."""

    chains: tuple[ChainDescriptor, ...]
    source: str = "live"


@dataclass(frozen=True)
class StaticCatalog:
    """Hardcoded chains, used when the aggregator could not be reached."""

    chains: tuple[ChainDescriptor, ...]
    source: str = "static"


ChainCatalog = Union[LiveCatalog, StaticCatalog]


def parse_chain(raw: dict) -> ChainDescriptor:
    """Parse a chain object from the aggregator.

    Raises:
        ProviderDataError: if required fields are missing or malformed
    """
    try:
        native = raw.get("nativeCurrency") or {}
        return ChainDescriptor(
            key=str(raw["chainKey"]),
            chain_id=int(raw["chainId"]),
            name=str(raw.get("name") or raw.get("shortName") or raw["chainKey"]),
            native_symbol=str(native.get("symbol", "")),
            native_decimals=int(native.get("decimals", 18)),
            chain_type=str(raw.get("chainType", "evm")),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ProviderDataError(f"Malformed chain entry: {raw!r}") from e


def parse_token(raw: dict) -> TokenDescriptor:
    """Parse a token object from the aggregator.

    Raises:
        ProviderDataError: if required fields are missing or malformed
    """
    try:
        price = raw.get("price") or {}
        price_usd = price.get("usd")
        return TokenDescriptor(
            chain_key=str(raw["chainKey"]),
            address=str(raw["address"]),
            decimals=int(raw["decimals"]),
            symbol=str(raw["symbol"]),
            is_bridgeable=bool(raw.get("isBridgeable", False)),
            price_usd=float(price_usd) if price_usd is not None else None,
            name=raw.get("name"),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ProviderDataError(f"Malformed token entry: {raw!r}") from e


class ChainRegistry:
    """Supported chains and per-chain token tables."""

    def __init__(
        self,
        client: StargateClient,
        fallback: Optional[FallbackProvider] = None,
        catalog: Optional[ChainCatalog] = None,
    ):
        """Initialize the registry.

        Args:
            client: Aggregator client
            fallback: Static data provider used when the live listing fails
            catalog: Pre-selected catalog (skips the live probe)
        """
        self.client = client
        self.fallback = fallback or FallbackProvider()
        self._catalog = catalog
        self._tokens: dict[str, tuple[TokenDescriptor, ...]] = {}

    @classmethod
    def static(cls, client: StargateClient, fallback: Optional[FallbackProvider] = None) -> "ChainRegistry":
        """Create a registry that never fetches the chain listing."""
        fallback = fallback or FallbackProvider()
        return cls(client, fallback, StaticCatalog(tuple(fallback.list_chains())))

    @property
    def source(self) -> Optional[str]:
        """'live' or 'static' once loaded, None before."""
        return self._catalog.source if self._catalog else None

    async def _probe(self) -> ChainCatalog:
        try:
            raw_chains = await self.client.get_chains()
            chains = tuple(parse_chain(raw) for raw in raw_chains)
            if not chains:
                raise ProviderDataError("Aggregator returned an empty chain list")
        except BridgeError as e:
            logger.warning(f"Chain listing unavailable, using static chains: {e}")
            return StaticCatalog(tuple(self.fallback.list_chains()))

        logger.info(f"Loaded {len(chains)} chains from {self.client.name}")
        return LiveCatalog(chains)

    async def load(self) -> ChainCatalog:
        """Select the catalog on first use; later calls return it unchanged."""
        if self._catalog is None:
            self._catalog = await self._probe()
        return self._catalog

    async def reload(self) -> ChainCatalog:
        """Re-run the live probe and replace the catalog."""
        self._catalog = await self._probe()
        return self._catalog

    async def list_chains(self) -> list[ChainDescriptor]:
        catalog = await self.load()
        return list(catalog.chains)

    async def get_chain(self, chain_key: str) -> Optional[ChainDescriptor]:
        catalog = await self.load()
        for chain in catalog.chains:
            if chain.key == chain_key:
                return chain
        return None

    async def is_supported(self, chain_key: str) -> bool:
        return await self.get_chain(chain_key) is not None

    async def get_tokens(self, chain_key: str, fallback_to_static: bool = True) -> list[TokenDescriptor]:
        """Get the token table for a chain.

        Live tables are fetched once and kept until ``refresh_tokens``. When
        the fetch fails the static table is returned and nothing is stored,
        so the next call tries the aggregator again.

        Raises:
            BridgeError: only when ``fallback_to_static`` is False
        """
        if chain_key in self._tokens:
            return list(self._tokens[chain_key])

        try:
            raw_tokens = await self.client.get_tokens(chain_key=chain_key)
            tokens = tuple(
                token
                for token in (parse_token(raw) for raw in raw_tokens)
                if token.chain_key == chain_key
            )
        except BridgeError as e:
            if not fallback_to_static:
                raise
            logger.warning(f"Token list for {chain_key} unavailable, using static table: {e}")
            return list(static.get_static_tokens(chain_key))

        self._tokens[chain_key] = tokens
        logger.debug(f"Cached {len(tokens)} tokens for {chain_key}")
        return list(tokens)

    def refresh_tokens(self, chain_key: Optional[str] = None) -> None:
        """Drop cached token tables so the next lookup re-fetches them."""
        if chain_key is None:
            self._tokens.clear()
        else:
            self._tokens.pop(chain_key, None)

    async def get_token(self, chain_key: str, address: str) -> Optional[TokenDescriptor]:
        """Find a token by address (case-insensitive).

        The native sentinel resolves to the chain's native currency.
        """
        if is_native_token(address):
            chain = await self.get_chain(chain_key) or static.get_fallback_chain(chain_key)
            if chain is None:
                return None
            return TokenDescriptor(
                chain_key=chain_key,
                address=static.NATIVE_TOKEN_ADDRESS,
                decimals=chain.native_decimals,
                symbol=chain.native_symbol,
                name=chain.native_symbol,
            )

        wanted = address.lower()
        for token in await self.get_tokens(chain_key):
            if token.address.lower() == wanted:
                return token
        for token in static.get_static_tokens(chain_key):
            if token.address.lower() == wanted:
                return token
        return None

    def known_decimals(self, chain_key: str, address: str) -> Optional[int]:
        """Token decimals from data already in memory, without network calls."""
        if is_native_token(address):
            chains = self._catalog.chains if self._catalog else ()
            for chain in chains:
                if chain.key == chain_key:
                    return chain.native_decimals
            chain = static.get_fallback_chain(chain_key)
            return chain.native_decimals if chain else None

        wanted = address.lower()
        candidates = list(self._tokens.get(chain_key, ())) + list(static.get_static_tokens(chain_key))
        for token in candidates:
            if token.address.lower() == wanted:
                return token.decimals
        return None

    def resolve_token_address(self, chain_key: str, symbol: str) -> Optional[str]:
        """Resolve a token symbol on a chain to its address.

        Looks at fetched token tables first, then the static table.
        """
        wanted = symbol.upper()
        candidates = list(self._tokens.get(chain_key, ())) + list(static.get_static_tokens(chain_key))
        for token in candidates:
            if token.symbol.upper() == wanted:
                return token.address
        return None

    async def all_tokens(self) -> list[TokenDescriptor]:
        """Token tables of every catalog chain, in catalog order.

        Each chain falls back to its static table independently.
        """
        chains = await self.list_chains()
        tables = await asyncio.gather(*(self.get_tokens(chain.key) for chain in chains))
        return [token for table in tables for token in table]

    async def search_tokens(self, query: str, chain_key: Optional[str] = None) -> list[TokenDescriptor]:
        """Tokens whose symbol, name or address contains ``query`` (case-insensitive).

        A blank query matches nothing.
        """
        needle = query.strip().lower()
        if not needle:
            return []

        if chain_key is None:
            tokens = await self.all_tokens()
        elif await self.is_supported(chain_key):
            tokens = await self.get_tokens(chain_key)
        else:
            return []

        return [
            token
            for token in tokens
            if needle in token.symbol.lower()
            or needle in (token.name or "").lower()
            or needle in token.address.lower()
        ]

    async def get_chains_for_token(self, symbol: str) -> list[str]:
        """Keys of the chains whose token table lists ``symbol``."""
        wanted = symbol.upper()
        found: list[str] = []
        for token in await self.all_tokens():
            if token.symbol.upper() == wanted and token.chain_key not in found:
                found.append(token.chain_key)
        return found

    async def get_bridge_pairs(self, symbol: str) -> list[BridgePair]:
        """Ordered chain pairs a bridgeable ``symbol`` can move between.

        Both directions are listed for every pair of chains, in catalog
        order. Only the first bridgeable token per chain is used.
        """
        wanted = symbol.upper()
        by_chain: dict[str, TokenDescriptor] = {}
        for token in await self.all_tokens():
            if token.is_bridgeable and token.symbol.upper() == wanted:
                by_chain.setdefault(token.chain_key, token)

        tokens = list(by_chain.values())
        pairs = []
        for i, first in enumerate(tokens):
            for second in tokens[i + 1:]:
                pairs.append(BridgePair(first.symbol, first.chain_key, second.chain_key, first.address, second.address))
                pairs.append(BridgePair(second.symbol, second.chain_key, first.chain_key, second.address, first.address))

        logger.debug(f"{len(pairs)} bridge pair(s) for {wanted}")
        return pairs
