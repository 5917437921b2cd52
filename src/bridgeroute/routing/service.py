"""Bridge service facade.

Ties the registry, discovery, fetcher and ranker together behind one object
and adds the convenience queries built on top of them.
"""

import asyncio
import logging
from typing import Optional, Union

from bridgeroute.chains import ChainDescriptor, TokenDescriptor
from bridgeroute.errors import BridgeError
from bridgeroute.routing.base import (
    BridgePair,
    FeeEstimate,
    Quote,
    QuotePolicy,
    QuoteRequest,
    SupportedToken,
)
from bridgeroute.routing.cache import RouteAvailabilityCache
from bridgeroute.routing.client import StargateClient
from bridgeroute.routing.discovery import RouteDiscoveryService
from bridgeroute.routing.fallback import FallbackProvider
from bridgeroute.routing.quotes import QuoteFetcher
from bridgeroute.routing.ranker import select_best
from bridgeroute.routing.registry import ChainRegistry

logger = logging.getLogger(__name__)


class BridgeService:
    """Route discovery and quoting over a single aggregator."""

    def __init__(
        self,
        client: StargateClient,
        registry: ChainRegistry,
        cache: RouteAvailabilityCache,
        discovery: RouteDiscoveryService,
        fetcher: QuoteFetcher,
        fallback: Optional[FallbackProvider] = None,
        default_policy: Union[QuotePolicy, str] = QuotePolicy.FASTEST,
    ):
        self.client = client
        self.registry = registry
        self.cache = cache
        self.discovery = discovery
        self.fetcher = fetcher
        self.fallback = fallback or registry.fallback
        self.default_policy = default_policy

    @property
    def chain_source(self) -> Optional[str]:
        """Where the chain list came from: 'live', 'static', or None before load."""
        return self.registry.source

    async def list_chains(self) -> list[ChainDescriptor]:
        return await self.registry.list_chains()

    async def get_chain(self, chain_key: str) -> Optional[ChainDescriptor]:
        return await self.registry.get_chain(chain_key)

    async def get_tokens(self, chain_key: str) -> list[TokenDescriptor]:
        """Token table for a supported chain, empty for unknown chains."""
        if not await self.registry.is_supported(chain_key):
            return []
        return await self.registry.get_tokens(chain_key)

    async def search_tokens(self, query: str, chain_key: Optional[str] = None) -> list[TokenDescriptor]:
        return await self.registry.search_tokens(query, chain_key)

    async def get_chains_for_token(self, symbol: str) -> list[str]:
        return await self.registry.get_chains_for_token(symbol)

    async def get_bridge_pairs(self, symbol: str) -> list[BridgePair]:
        return await self.registry.get_bridge_pairs(symbol)

    async def is_route_available(
        self,
        src_chain_key: str,
        src_token: str,
        dst_chain_key: str,
        dst_token: str,
    ) -> bool:
        return await self.discovery.is_available(src_chain_key, src_token, dst_chain_key, dst_token)

    async def get_available_destinations(
        self,
        src_chain_key: str,
        src_token: str,
    ) -> dict[str, list[TokenDescriptor]]:
        return await self.discovery.get_available_destinations(src_chain_key, src_token)

    async def get_quotes(self, request: QuoteRequest) -> list[Quote]:
        return await self.fetcher.get_quotes(request)

    async def get_best_quote(
        self,
        request: QuoteRequest,
        policy: Union[QuotePolicy, str, None] = None,
    ) -> Optional[Quote]:
        """Fetch quotes and return the best one under ``policy``.

        Raises:
            ValidationError: unknown policy (checked before any network call)
        """
        policy = policy or self.default_policy
        # fail fast on a bad policy
        select_best([], policy)

        quotes = await self.fetcher.get_quotes(request)
        return select_best(quotes, policy)

    async def estimate_fees(self, request: QuoteRequest) -> Optional[FeeEstimate]:
        return await self.fetcher.estimate_fees(request)

    async def get_supported_tokens(self, src_chain_key: str, dst_chain_key: str) -> list[SupportedToken]:
        """Tokens bridgeable in both directions' token tables, matched by symbol.

        Uses the live token tables of both chains. If either lookup fails,
        answers from the static known-good routes instead.
        """
        for chain_key in (src_chain_key, dst_chain_key):
            if not await self.registry.is_supported(chain_key):
                logger.info(f"No supported tokens: chain '{chain_key}' is not supported")
                return []

        try:
            src_tokens, dst_tokens = await asyncio.gather(
                self.registry.get_tokens(src_chain_key, fallback_to_static=False),
                self.registry.get_tokens(dst_chain_key, fallback_to_static=False),
            )
        except BridgeError as e:
            logger.warning(
                f"Live token tables unavailable for {src_chain_key} -> {dst_chain_key}, "
                f"using known routes: {e}"
            )
            return self.fallback.supported_tokens(src_chain_key, dst_chain_key)

        dst_by_symbol: dict[str, TokenDescriptor] = {}
        for token in dst_tokens:
            if token.is_bridgeable:
                dst_by_symbol.setdefault(token.symbol.upper(), token)

        supported = []
        for token in src_tokens:
            match = dst_by_symbol.get(token.symbol.upper())
            if token.is_bridgeable and match is not None:
                supported.append(
                    SupportedToken(
                        symbol=token.symbol,
                        src_address=token.address,
                        dst_address=match.address,
                    )
                )

        logger.debug(
            f"Supported tokens {src_chain_key} -> {dst_chain_key}: "
            f"{[t.symbol for t in supported] or 'none'}"
        )
        return supported
