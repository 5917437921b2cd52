"""Tests for quote ranking and the bridge service facade."""

import pytest

from bridgeroute.errors import ValidationError
from bridgeroute.routing.base import Fee, FeeKind, Quote, QuotePolicy, QuoteRequest
from bridgeroute.routing.factory import create_bridge_service
from bridgeroute.routing.ranker import select_best
from bridgeroute.config import Settings
from conftest import (
    API_URL,
    ARB_USDC,
    ETH_USDC,
    ETH_WETH,
    WALLET,
    FakeAggregator,
    raw_quote,
    raw_token,
)


def make_quote(label: str, duration: int, fee_amounts: tuple = ()) -> Quote:
    return Quote(
        route_label=label,
        src_amount=1_000_000,
        dst_amount=990_000,
        dst_amount_min=985_000,
        estimated_duration_seconds=duration,
        fees=tuple(
            Fee(token_address="0xfee", amount=amount, kind=FeeKind.MESSAGE, chain_key="ethereum")
            for amount in fee_amounts
        ),
    )


class TestSelectBest:
    """Tests for the quote ranker."""

    def test_fastest(self):
        """Lowest estimated duration wins."""
        quotes = [make_quote("a", 600), make_quote("b", 180), make_quote("c", 900)]
        assert select_best(quotes, QuotePolicy.FASTEST).route_label == "b"

    def test_cheapest(self):
        """Lowest fee sum wins."""
        quotes = [
            make_quote("a", 60, (2_000_000_000_000_000, 500_000_000_000_000)),
            make_quote("b", 600, (1_000_000_000_000_000,)),
        ]
        assert select_best(quotes, "cheapest").route_label == "b"

    def test_cheapest_sums_across_fee_tokens(self):
        """Fee amounts in different tokens are added as-is."""
        mixed = Quote(
            route_label="mixed",
            src_amount=1,
            dst_amount=1,
            dst_amount_min=1,
            estimated_duration_seconds=60,
            fees=(
                Fee("0xeth", 10, FeeKind.MESSAGE, "ethereum"),
                Fee("0xusdc", 10, FeeKind.PROTOCOL, "ethereum"),
            ),
        )
        single = make_quote("single", 60, (15,))
        assert select_best([mixed, single], QuotePolicy.CHEAPEST).route_label == "single"

    def test_tie_keeps_provider_order(self):
        quotes = [make_quote("first", 180), make_quote("second", 180)]
        assert select_best(quotes).route_label == "first"

    def test_empty(self):
        assert select_best([], QuotePolicy.CHEAPEST) is None

    def test_unknown_policy(self):
        with pytest.raises(ValidationError):
            select_best([make_quote("a", 1)], "scenic")


class TestQuoteModel:
    """Tests for Quote invariants."""

    def test_min_above_amount_rejected(self):
        with pytest.raises(ValueError):
            Quote("x", 1, dst_amount=100, dst_amount_min=101, estimated_duration_seconds=1)

    def test_to_dict_amounts_are_strings(self):
        data = make_quote("stargate/v2/taxi", 180, (5,)).to_dict()

        assert data["route"] == "stargate/v2/taxi"
        assert data["dst_amount_min"] == "985000"
        assert data["fees"][0]["amount"] == "5"
        assert data["fees"][0]["kind"] == "message"


def quote_request(**overrides) -> QuoteRequest:
    params = dict(
        src_chain_key="ethereum",
        dst_chain_key="arbitrum",
        src_token=ETH_WETH,
        dst_token=ARB_USDC,
        amount="1",
        src_address=WALLET,
        dst_address=WALLET,
    )
    params.update(overrides)
    return QuoteRequest(**params)


class TestBridgeService:
    """Tests for the BridgeService facade."""

    @pytest.mark.asyncio
    async def test_best_quote_fastest(self, bridge_service, aggregator):
        aggregator.quotes = [
            raw_quote(route="bus", duration=600),
            raw_quote(route="taxi", duration=180),
            raw_quote(route="slow", duration=900),
        ]
        best = await bridge_service.get_best_quote(quote_request())
        assert best.route_label == "taxi"

    @pytest.mark.asyncio
    async def test_best_quote_none_when_no_quotes(self, bridge_service, aggregator):
        aggregator.quotes = []
        assert await bridge_service.get_best_quote(quote_request()) is None

    @pytest.mark.asyncio
    async def test_bad_policy_fails_before_network(self, bridge_service, aggregator):
        with pytest.raises(ValidationError):
            await bridge_service.get_best_quote(quote_request(), policy="scenic")
        assert aggregator.count() == 0

    @pytest.mark.asyncio
    async def test_tokens_for_unknown_chain(self, bridge_service, aggregator):
        assert await bridge_service.get_tokens("atlantis") == []
        assert aggregator.count("/tokens") == 0

    @pytest.mark.asyncio
    async def test_supported_tokens_live(self, bridge_service, aggregator):
        """Bridgeable tokens are matched across chains by symbol."""
        aggregator.tokens.append(raw_token("arbitrum", "0x9999999999999999999999999999999999999999", "DAI", bridgeable=False))
        aggregator.tokens.append(raw_token("ethereum", "0x6B175474E89094C44Da98b954EedeAC495271d0F", "DAI"))

        tokens = await bridge_service.get_supported_tokens("ethereum", "arbitrum")

        by_symbol = {t.symbol: t for t in tokens}
        assert set(by_symbol) == {"USDC", "WETH"}
        assert by_symbol["USDC"].src_address == ETH_USDC
        assert by_symbol["USDC"].dst_address == ARB_USDC

    @pytest.mark.asyncio
    async def test_supported_tokens_fall_back_to_known_routes(self, bridge_service, aggregator):
        aggregator.fail("/tokens", timeout=True)
        tokens = await bridge_service.get_supported_tokens("ethereum", "base")
        assert {t.symbol for t in tokens} == {"USDC", "WETH"}

    @pytest.mark.asyncio
    async def test_supported_tokens_unsupported_chain(self, bridge_service, aggregator):
        assert await bridge_service.get_supported_tokens("ethereum", "atlantis") == []
        assert aggregator.count("/tokens") == 0

    @pytest.mark.asyncio
    async def test_token_queries(self, bridge_service):
        assert [t.address for t in await bridge_service.search_tokens("usdc", chain_key="ethereum")] == [ETH_USDC]
        assert await bridge_service.get_chains_for_token("WETH") == ["ethereum", "arbitrum"]

        pairs = await bridge_service.get_bridge_pairs("WETH")
        assert [(p.src_chain_key, p.dst_chain_key) for p in pairs] == [
            ("ethereum", "arbitrum"),
            ("arbitrum", "ethereum"),
        ]

    @pytest.mark.asyncio
    async def test_chain_source(self, bridge_service):
        assert bridge_service.chain_source is None
        await bridge_service.list_chains()
        assert bridge_service.chain_source == "live"


class TestFactory:
    """Tests for create_bridge_service."""

    @pytest.mark.asyncio
    async def test_wires_settings(self):
        aggregator = FakeAggregator()
        settings = Settings(
            stargate_api_url=API_URL,
            http_timeout=3.0,
            route_cache_ttl=60,
            probe_amount="5000",
            default_quote_policy="cheapest",
        )
        service = create_bridge_service(settings, transport=aggregator.transport)

        assert service.client.timeout == 3.0
        assert service.cache.ttl_seconds == 60
        assert service.discovery.probe_amount == 5000
        assert service.default_policy is QuotePolicy.CHEAPEST
        assert await service.is_route_available("ethereum", ETH_USDC, "arbitrum", ARB_USDC)
        assert aggregator.count("/chains") == 1
