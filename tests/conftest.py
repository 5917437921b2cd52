"""Pytest configuration and fixtures."""

import os
from typing import Callable, Optional, Union

import httpx
import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"
os.environ["STARGATE_API_URL"] = "https://stargate.test/api/v1"

from bridgeroute.chains import NATIVE_TOKEN_ADDRESS
from bridgeroute.routing.cache import RouteAvailabilityCache
from bridgeroute.routing.client import StargateClient
from bridgeroute.routing.discovery import RouteDiscoveryService
from bridgeroute.routing.fallback import FallbackProvider
from bridgeroute.routing.quotes import QuoteFetcher
from bridgeroute.routing.registry import ChainRegistry
from bridgeroute.routing.service import BridgeService

API_URL = "https://stargate.test/api/v1"

ETH_USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
ETH_WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
ARB_USDC = "0xaf88d065e77c8cC2239327C5EDb3A432268e5831"
ARB_WETH = "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1"
POLY_USDC = "0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359"

WALLET = "0x1111111111111111111111111111111111111111"
STARGATE_ROUTER = "0x2222222222222222222222222222222222222222"


class FakeClock:
    """Manually advanced time source for cache TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def raw_chain(key: str, chain_id: int, symbol: str = "ETH", name: Optional[str] = None) -> dict:
    return {
        "chainKey": key,
        "chainType": "evm",
        "chainId": chain_id,
        "shortName": key.title(),
        "name": name or key.title(),
        "nativeCurrency": {
            "chainKey": key,
            "name": symbol,
            "symbol": symbol,
            "decimals": 18,
            "address": NATIVE_TOKEN_ADDRESS,
        },
    }


def raw_token(
    chain_key: str,
    address: str,
    symbol: str,
    decimals: int = 6,
    bridgeable: bool = True,
    price_usd: Optional[float] = None,
) -> dict:
    token = {
        "isBridgeable": bridgeable,
        "chainKey": chain_key,
        "address": address,
        "decimals": decimals,
        "symbol": symbol,
        "name": symbol,
    }
    if price_usd is not None:
        token["price"] = {"usd": price_usd}
    return token


def raw_step(kind: str, chain_key: str = "ethereum", value: Optional[str] = None) -> dict:
    tx = {"to": STARGATE_ROUTER, "data": "0xdeadbeef", "from": WALLET}
    if value is not None:
        tx["value"] = value
    return {"type": kind, "chainKey": chain_key, "sender": WALLET, "transaction": tx}


def raw_quote(
    route: str = "stargate/v2/taxi",
    dst_amount: Union[int, str] = 1_490_000,
    duration: int = 180,
    fees: Optional[list] = None,
    steps: Optional[list] = None,
    src_amount: Union[int, str] = "1500000000000000000",
    error: Optional[dict] = None,
) -> dict:
    return {
        "route": route,
        "error": error,
        "srcAmount": str(src_amount),
        "dstAmount": str(dst_amount),
        "dstAmountMin": str(dst_amount),
        "duration": {"estimated": duration},
        "fees": fees if fees is not None else [
            {"token": NATIVE_TOKEN_ADDRESS, "amount": "1000000000000000", "type": "message", "chainKey": "ethereum"},
        ],
        "steps": steps if steps is not None else [raw_step("bridge", value="1000000000000000")],
    }


Handler = Callable[[httpx.Request], httpx.Response]


class FakeAggregator:
    """In-memory stand-in for the aggregator, served through httpx.MockTransport.

    Set ``chains``, ``tokens``, ``reachable`` and ``quotes`` for happy paths,
    or ``fail(path, ...)`` to make an endpoint time out or return an error.
    Every request is recorded in ``requests``.
    """

    def __init__(self):
        self.chains: list[dict] = [
            raw_chain("ethereum", 1),
            raw_chain("arbitrum", 42161),
            raw_chain("polygon", 137, symbol="POL"),
            raw_chain("base", 8453),
        ]
        self.tokens: list[dict] = [
            raw_token("ethereum", ETH_USDC, "USDC"),
            raw_token("ethereum", ETH_WETH, "WETH", decimals=18),
            raw_token("arbitrum", ARB_USDC, "USDC"),
            raw_token("arbitrum", ARB_WETH, "WETH", decimals=18),
            raw_token("polygon", POLY_USDC, "USDC"),
        ]
        # (srcChainKey, lowercased srcToken) -> reachable token list
        self.reachable: dict[tuple[str, str], list[dict]] = {}
        self.quotes: list[dict] = [raw_quote()]
        self.overrides: dict[str, Handler] = {}
        self.requests: list[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def count(self, path: Optional[str] = None) -> int:
        if path is None:
            return len(self.requests)
        return sum(1 for request in self.requests if self._path(request) == path)

    def fail(
        self,
        path: str,
        status: Optional[int] = None,
        timeout: bool = False,
        text: Optional[str] = None,
    ) -> None:
        """Make ``path`` time out, or answer with ``status`` / a raw body."""

        def handler(request: httpx.Request) -> httpx.Response:
            if timeout:
                raise httpx.ReadTimeout("timed out", request=request)
            if text is not None:
                return httpx.Response(status or 200, text=text)
            return httpx.Response(status, json={"message": f"error {status}"})

        self.overrides[path] = handler

    def restore(self, path: str) -> None:
        self.overrides.pop(path, None)

    @staticmethod
    def _path(request: httpx.Request) -> str:
        return request.url.path.removeprefix("/api/v1")

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = self._path(request)

        if path in self.overrides:
            return self.overrides[path](request)

        if path == "/chains":
            return httpx.Response(200, json={"chains": self.chains})
        if path == "/tokens":
            params = request.url.params
            if "srcChainKey" in params:
                key = (params["srcChainKey"], params["srcToken"].lower())
                return httpx.Response(200, json={"tokens": self.reachable.get(key, [])})
            tokens = self.tokens
            if "chainKey" in params:
                tokens = [t for t in tokens if t["chainKey"] == params["chainKey"]]
            return httpx.Response(200, json={"tokens": tokens})
        if path == "/quotes":
            return httpx.Response(200, json={"quotes": self.quotes})
        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture
def aggregator() -> FakeAggregator:
    return FakeAggregator()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stargate(aggregator) -> StargateClient:
    """Aggregator client wired to the fake aggregator."""
    return StargateClient(base_url=API_URL, timeout=10.0, transport=aggregator.transport)


@pytest.fixture
def route_cache(clock) -> RouteAvailabilityCache:
    return RouteAvailabilityCache(ttl_seconds=300.0, clock=clock)


@pytest.fixture
def registry(stargate) -> ChainRegistry:
    return ChainRegistry(stargate, FallbackProvider())


@pytest.fixture
def discovery(stargate, registry, route_cache) -> RouteDiscoveryService:
    return RouteDiscoveryService(stargate, registry, route_cache)


@pytest.fixture
def fetcher(stargate, registry, discovery) -> QuoteFetcher:
    return QuoteFetcher(stargate, registry, discovery, default_slippage="0.005")


@pytest.fixture
def bridge_service(stargate, registry, route_cache, discovery, fetcher) -> BridgeService:
    return BridgeService(
        client=stargate,
        registry=registry,
        cache=route_cache,
        discovery=discovery,
        fetcher=fetcher,
    )
