"""Last-resort static data for when the aggregator is unreachable.

Serves chain listings and known-good routes from ``bridgeroute.chains``.
It has no quote method on purpose: quotes only ever come from the live
aggregator.
"""

import logging

from bridgeroute import chains as static
from bridgeroute.chains import ChainDescriptor, KnownRoute
from bridgeroute.routing.base import SupportedToken

logger = logging.getLogger(__name__)


class FallbackProvider:
    """Read-only view over the static chain and route tables."""

    def __init__(
        self,
        chains: tuple[ChainDescriptor, ...] = static.FALLBACK_CHAINS,
        routes: tuple[KnownRoute, ...] = static.KNOWN_ROUTES,
    ):
        self._chains = chains
        self._routes = routes

    def list_chains(self) -> list[ChainDescriptor]:
        """Get the hardcoded chain list."""
        return list(self._chains)

    def supported_tokens(self, src_chain_key: str, dst_chain_key: str) -> list[SupportedToken]:
        """Get tokens with a known-good route between two chains."""
        tokens = [
            SupportedToken(
                symbol=route.symbol,
                src_address=route.src_address,
                dst_address=route.dst_address,
            )
            for route in self._routes
            if route.src_chain_key == src_chain_key and route.dst_chain_key == dst_chain_key
        ]
        logger.debug(
            f"Static routes {src_chain_key} -> {dst_chain_key}: "
            f"{[t.symbol for t in tokens] or 'none'}"
        )
        return tokens
