"""Routing module for cross-chain bridge route discovery and quoting.

Components:
- ChainRegistry: supported chains and token tables (live, else static)
- RouteAvailabilityCache: TTL cache of route verdicts
- RouteDiscoveryService: reachable-tokens lookup, then a probe quote
- QuoteFetcher: full quotes for a real amount
- select_best: fastest / cheapest ranking
- BridgeService: facade over all of the above
"""

from bridgeroute.routing.base import (
    Fee,
    FeeEstimate,
    FeeKind,
    Quote,
    QuotePolicy,
    QuoteRequest,
    RouteKey,
    StepKind,
    SupportedToken,
    TransactionStep,
)
from bridgeroute.routing.cache import RouteAvailabilityCache
from bridgeroute.routing.client import StargateClient
from bridgeroute.routing.discovery import RouteDiscoveryService
from bridgeroute.routing.factory import create_bridge_service
from bridgeroute.routing.fallback import FallbackProvider
from bridgeroute.routing.quotes import QuoteFetcher
from bridgeroute.routing.ranker import select_best
from bridgeroute.routing.registry import ChainRegistry, LiveCatalog, StaticCatalog
from bridgeroute.routing.service import BridgeService

__all__ = [
    # Data types
    "Fee",
    "FeeEstimate",
    "FeeKind",
    "Quote",
    "QuotePolicy",
    "QuoteRequest",
    "RouteKey",
    "StepKind",
    "SupportedToken",
    "TransactionStep",
    # Components
    "BridgeService",
    "ChainRegistry",
    "FallbackProvider",
    "LiveCatalog",
    "QuoteFetcher",
    "RouteAvailabilityCache",
    "RouteDiscoveryService",
    "StargateClient",
    "StaticCatalog",
    # Helpers
    "create_bridge_service",
    "select_best",
]
