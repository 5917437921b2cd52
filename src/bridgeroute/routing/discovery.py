"""Route discovery: is there a working bridge route between two tokens?

Lookup order for a route:

1. The availability cache.
2. Chain support in the registry. Unsupported chains short-circuit to
   False without touching the cache, since chain support is static.
3. Tier 1: the aggregator's "tokens reachable from this token" index. It is
   cheap but can be incomplete.
4. Tier 2: a minimal probe quote. Only used when tier 1 does not list the
   destination.

Verdict caching follows the failure class of the probe: a 422 (or an empty
quote list) is definitive and cached as unavailable, while timeouts, 5xx
and malformed responses are transient and leave the cache untouched.
"""

import logging
from typing import Optional

from bridgeroute.errors import (
    BridgeError,
    ProviderDataError,
    TransientNetworkError,
    UnsupportedRouteError,
    ValidationError,
)
from bridgeroute.chains import TokenDescriptor
from bridgeroute.routing.base import RouteKey
from bridgeroute.routing.cache import RouteAvailabilityCache
from bridgeroute.routing.client import StargateClient
from bridgeroute.routing.registry import ChainRegistry, parse_token

logger = logging.getLogger(__name__)

DEFAULT_PROBE_AMOUNT = 10**18
PROBE_ADDRESS = "0x0000000000000000000000000000000000000001"


class RouteDiscoveryService:
    """Decides route viability, consulting and populating the cache."""

    def __init__(
        self,
        client: StargateClient,
        registry: ChainRegistry,
        cache: RouteAvailabilityCache,
        probe_amount: int = DEFAULT_PROBE_AMOUNT,
        probe_address: str = PROBE_ADDRESS,
    ):
        """Initialize the discovery service.

        Args:
            client: Aggregator client
            registry: Chain registry for support checks and token decimals
            cache: Availability cache (owned by the caller, shared by reference)
            probe_amount: Probe size in base units when token decimals are unknown
            probe_address: Placeholder sender/recipient for probe quotes
        """
        self.client = client
        self.registry = registry
        self.cache = cache
        self.probe_amount = probe_amount
        self.probe_address = probe_address

    async def is_available(
        self,
        src_chain_key: str,
        src_token: str,
        dst_chain_key: str,
        dst_token: str,
    ) -> bool:
        """Check whether ``src_token`` on ``src_chain_key`` can be bridged to
        ``dst_token`` on ``dst_chain_key``.

        Never raises for network or provider problems; those yield False.
        """
        key = RouteKey(src_chain_key, src_token, dst_chain_key, dst_token)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Route {key} cache hit: {cached}")
            return cached

        for chain_key in (src_chain_key, dst_chain_key):
            if not await self.registry.is_supported(chain_key):
                logger.info(f"Route {key} rejected: chain '{chain_key}' is not supported")
                return False

        if await self._listed_as_reachable(key):
            logger.info(f"Route {key} available (reachable-tokens index)")
            self.cache.set(key, True)
            return True

        verdict = await self._probe(key)
        if verdict is None:
            # transient failure, the next call has to probe again
            return False

        self.cache.set(key, verdict)
        logger.info(f"Route {key} {'available' if verdict else 'unavailable'} (probe quote)")
        return verdict

    def record_unsupported(self, key: RouteKey) -> None:
        """Cache a definitive negative seen outside discovery (e.g. a 422 on a full quote)."""
        self.cache.set(key, False)

    async def _reachable_tokens(self, src_chain_key: str, src_token: str) -> list[TokenDescriptor]:
        raw_tokens = await self.client.get_tokens(src_chain_key=src_chain_key, src_token=src_token)
        return [parse_token(raw) for raw in raw_tokens]

    async def _listed_as_reachable(self, key: RouteKey) -> bool:
        """Tier 1. Any failure here just means 'not confirmed'."""
        try:
            tokens = await self._reachable_tokens(key.src_chain_key, key.src_token)
        except BridgeError as e:
            logger.debug(f"Reachable-tokens lookup failed for {key}, falling back to probe: {e}")
            return False

        return any(
            token.is_bridgeable
            and token.chain_key == key.dst_chain_key
            and token.address.lower() == key.dst_token
            for token in tokens
        )

    def _probe_amount_for(self, key: RouteKey) -> int:
        decimals = self.registry.known_decimals(key.src_chain_key, key.src_token)
        if decimals is None:
            return self.probe_amount
        return 10**decimals

    async def _probe(self, key: RouteKey) -> Optional[bool]:
        """Tier 2. Returns True/False when definitive, None when transient."""
        try:
            quotes = await self.client.get_quotes(
                src_token=key.src_token,
                dst_token=key.dst_token,
                src_address=self.probe_address,
                dst_address=self.probe_address,
                src_chain_key=key.src_chain_key,
                dst_chain_key=key.dst_chain_key,
                src_amount=self._probe_amount_for(key),
                dst_amount_min=0,
            )
        except UnsupportedRouteError:
            return False
        except ValidationError as e:
            logger.warning(f"Probe for {key} rejected as malformed, not caching: {e}")
            return None
        except (TransientNetworkError, ProviderDataError) as e:
            logger.warning(f"Probe for {key} failed transiently, not caching: {e}")
            return None

        usable = [quote for quote in quotes if not quote.get("error")]
        return bool(usable)

    async def get_available_destinations(
        self,
        src_chain_key: str,
        src_token: str,
    ) -> dict[str, list[TokenDescriptor]]:
        """Group the bridgeable tokens reachable from a source token by chain.

        Returns an empty mapping if the source chain is unsupported or the
        lookup fails.
        """
        if not await self.registry.is_supported(src_chain_key):
            return {}

        try:
            tokens = await self._reachable_tokens(src_chain_key, src_token)
        except BridgeError as e:
            logger.warning(f"Could not list destinations for {src_chain_key}:{src_token}: {e}")
            return {}

        destinations: dict[str, list[TokenDescriptor]] = {}
        for token in tokens:
            if token.is_bridgeable and token.chain_key != src_chain_key:
                destinations.setdefault(token.chain_key, []).append(token)
        return destinations
