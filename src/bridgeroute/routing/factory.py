"""Factory for wiring the bridge service from settings.

Each component gets its own constructor so tests and scripts can build a
partial stack (e.g. a registry with a mock transport) without the rest.
"""

import logging
from typing import Optional

import httpx

from bridgeroute.config import Settings, get_settings
from bridgeroute.routing.cache import RouteAvailabilityCache
from bridgeroute.routing.client import StargateClient
from bridgeroute.routing.discovery import RouteDiscoveryService
from bridgeroute.routing.fallback import FallbackProvider
from bridgeroute.routing.quotes import QuoteFetcher
from bridgeroute.routing.ranker import coerce_policy
from bridgeroute.routing.registry import ChainRegistry
from bridgeroute.routing.service import BridgeService

logger = logging.getLogger(__name__)


def create_client(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> StargateClient:
    """Create the aggregator client."""
    settings = settings or get_settings()
    return StargateClient(
        base_url=settings.stargate_api_url,
        timeout=settings.http_timeout,
        transport=transport,
    )


def create_cache(settings: Optional[Settings] = None) -> RouteAvailabilityCache:
    settings = settings or get_settings()
    return RouteAvailabilityCache(ttl_seconds=settings.route_cache_ttl)


def create_discovery(
    client: StargateClient,
    registry: ChainRegistry,
    cache: RouteAvailabilityCache,
    settings: Optional[Settings] = None,
) -> RouteDiscoveryService:
    """Create the discovery service with the configured probe parameters."""
    settings = settings or get_settings()
    return RouteDiscoveryService(
        client=client,
        registry=registry,
        cache=cache,
        probe_amount=int(settings.probe_amount),
        probe_address=settings.probe_address,
    )


def create_bridge_service(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> BridgeService:
    """Create a fully wired bridge service.

    Args:
        settings: Settings to use (defaults to the cached application settings)
        transport: Optional httpx transport for the aggregator client
    """
    settings = settings or get_settings()

    client = create_client(settings, transport)
    fallback = FallbackProvider()
    cache = create_cache(settings)
    registry = ChainRegistry(client, fallback)
    discovery = create_discovery(client, registry, cache, settings)
    fetcher = QuoteFetcher(
        client=client,
        registry=registry,
        discovery=discovery,
        default_slippage=str(settings.default_slippage),
    )

    logger.info(
        f"Bridge service using {client.name} at {client.base_url} "
        f"(timeout={client.timeout}s, cache_ttl={cache.ttl_seconds}s)"
    )
    return BridgeService(
        client=client,
        registry=registry,
        cache=cache,
        discovery=discovery,
        fetcher=fetcher,
        fallback=fallback,
        default_policy=coerce_policy(settings.default_quote_policy),
    )
