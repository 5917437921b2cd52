"""Tests for the FastAPI endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from bridgeroute.api.app import create_app
from bridgeroute.web.controllers.bridge import get_bridge_service
from bridgeroute.web.services.bridge_service import BridgeWebService
from conftest import ARB_USDC, ETH_USDC, ETH_WETH, WALLET, raw_quote, raw_step, raw_token


@pytest.fixture
def test_app(bridge_service):
    """Create test application backed by the fake aggregator."""
    app = create_app()
    app.dependency_overrides[get_bridge_service] = lambda: BridgeWebService(bridge_service)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    """Create async test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


QUOTE_BODY = {
    "src_chain_key": "ethereum",
    "dst_chain_key": "arbitrum",
    "src_token": ETH_WETH,
    "dst_token": ARB_USDC,
    "amount": "1.5",
    "src_address": WALLET,
    "slippage": "0.005",
}


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_health_check(self, client):
        """Test basic health check."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "bridgeroute"

    @pytest.mark.asyncio
    async def test_detailed_health(self, client):
        """Test detailed health check."""
        response = await client.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["config"]["environment"] == "test"
        assert data["config"]["aggregator"]["timeout"] == 10.0

    @pytest.mark.asyncio
    async def test_detailed_health_reports_chain_source(self, client, aggregator):
        """Source is null until the catalog is chosen, then live."""
        assert (await client.get("/health/detailed")).json()["chain_source"] is None

        await client.get("/bridge/chains")
        data = (await client.get("/health/detailed")).json()
        assert data["chain_source"] == "live"
        assert data["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_detailed_health_degraded_on_static_catalog(self, client, aggregator):
        aggregator.fail("/chains", timeout=True)
        await client.get("/bridge/chains")

        data = (await client.get("/health/detailed")).json()
        assert data["chain_source"] == "static"
        assert data["status"] == "degraded"


class TestChainEndpoints:
    """Tests for chain and token endpoints."""

    @pytest.mark.asyncio
    async def test_list_chains_live(self, client):
        response = await client.get("/bridge/chains")

        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "live"
        assert data["total"] == 4

    @pytest.mark.asyncio
    async def test_list_chains_static(self, client, aggregator):
        aggregator.fail("/chains", timeout=True)
        data = (await client.get("/bridge/chains")).json()

        assert data["source"] == "static"
        assert "somnia" in [c["key"] for c in data["chains"]]

    @pytest.mark.asyncio
    async def test_get_chain(self, client):
        response = await client.get("/bridge/chains/arbitrum")
        assert response.status_code == 200
        assert response.json()["chain_id"] == 42161

    @pytest.mark.asyncio
    async def test_unknown_chain_404(self, client):
        response = await client.get("/bridge/chains/atlantis")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_tokens(self, client):
        data = (await client.get("/bridge/tokens", params={"chain_key": "ethereum"})).json()
        assert {t["symbol"] for t in data["tokens"]} == {"USDC", "WETH"}


    @pytest.mark.asyncio
    async def test_search_tokens(self, client):
        data = (await client.get("/bridge/tokens/search", params={"query": "usdc"})).json()

        assert data["total"] == 3
        assert {t["chain_key"] for t in data["tokens"]} == {"ethereum", "arbitrum", "polygon"}

    @pytest.mark.asyncio
    async def test_search_tokens_requires_query(self, client):
        response = await client.get("/bridge/tokens/search", params={"query": ""})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_chains_for_token(self, client):
        data = (await client.get("/bridge/tokens/WETH/chains")).json()
        assert data["chains"] == ["ethereum", "arbitrum"]
        assert data["total"] == 2

    @pytest.mark.asyncio
    async def test_bridge_pairs(self, client):
        data = (await client.get("/bridge/pairs", params={"symbol": "USDC"})).json()

        assert data["total"] == 6
        first = data["pairs"][0]
        assert (first["src_chain_key"], first["dst_chain_key"]) == ("ethereum", "arbitrum")
        assert first["src_address"] == ETH_USDC


class TestRouteEndpoints:
    """Tests for route availability endpoints."""

    @pytest.mark.asyncio
    async def test_check_route(self, client):
        response = await client.get(
            "/bridge/routes/check",
            params={"src_chain": "ethereum", "src_token": ETH_USDC, "dst_chain": "arbitrum", "dst_token": ARB_USDC},
        )
        assert response.status_code == 200
        assert response.json()["available"] is True

    @pytest.mark.asyncio
    async def test_check_route_unsupported(self, client, aggregator):
        aggregator.fail("/quotes", status=422)
        response = await client.get(
            "/bridge/routes/check",
            params={"src_chain": "ethereum", "src_token": ETH_USDC, "dst_chain": "arbitrum", "dst_token": ARB_USDC},
        )
        assert response.json()["available"] is False

    @pytest.mark.asyncio
    async def test_check_route_missing_params(self, client):
        response = await client.get("/bridge/routes/check", params={"src_chain": "ethereum"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_destinations(self, client, aggregator):
        aggregator.reachable[("ethereum", ETH_USDC.lower())] = [raw_token("arbitrum", ARB_USDC, "USDC")]
        data = (await client.get(
            "/bridge/destinations", params={"src_chain": "ethereum", "src_token": ETH_USDC}
        )).json()

        assert data["total_chains"] == 1
        assert data["destinations"]["arbitrum"][0]["address"] == ARB_USDC

    @pytest.mark.asyncio
    async def test_supported_tokens_when_aggregator_down(self, client, aggregator):
        aggregator.fail("/tokens", status=503)
        data = (await client.get(
            "/bridge/supported-tokens", params={"src_chain": "ethereum", "dst_chain": "base"}
        )).json()
        assert {t["symbol"] for t in data["tokens"]} == {"USDC", "WETH"}


class TestQuoteEndpoints:
    """Tests for quote endpoints."""

    @pytest.mark.asyncio
    async def test_quotes(self, client, aggregator):
        aggregator.quotes = [
            raw_quote(route="bus", duration=600, dst_amount=1_490_000),
            raw_quote(route="taxi", duration=180, dst_amount=1_480_000, steps=[raw_step("approve"), raw_step("bridge")]),
        ]
        response = await client.post("/bridge/quotes", json=QUOTE_BODY)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["policy"] == "fastest"
        assert [q["route"] for q in data["quotes"]] == ["bus", "taxi"]
        assert data["quotes"][0]["dst_amount_min"] == "1482550"
        assert data["best_quote"]["route"] == "taxi"
        assert [s["kind"] for s in data["best_quote"]["steps"]] == ["approve", "bridge"]

    @pytest.mark.asyncio
    async def test_best_quote_cheapest(self, client, aggregator):
        aggregator.quotes = [
            raw_quote(route="bus", fees=[{"token": ETH_WETH, "amount": "100", "type": "message", "chainKey": "ethereum"}]),
            raw_quote(route="taxi", fees=[{"token": ETH_WETH, "amount": "900", "type": "message", "chainKey": "ethereum"}]),
        ]
        data = (await client.post("/bridge/quotes/best", json={**QUOTE_BODY, "policy": "cheapest"})).json()

        assert data["success"] is True
        assert data["quote"]["route"] == "bus"

    @pytest.mark.asyncio
    async def test_no_quotes_is_not_an_http_error(self, client, aggregator):
        aggregator.fail("/quotes", timeout=True)
        response = await client.post("/bridge/quotes/best", json=QUOTE_BODY)

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["quote"] is None

    @pytest.mark.asyncio
    async def test_invalid_policy_rejected(self, client):
        response = await client.post("/bridge/quotes", json={**QUOTE_BODY, "policy": "scenic"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_non_positive_amount_rejected(self, client):
        response = await client.post("/bridge/quotes", json={**QUOTE_BODY, "amount": "0"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_oversized_amount_is_not_a_server_error(self, client):
        response = await client.post("/bridge/quotes", json={**QUOTE_BODY, "amount": "1e1000000"})

        assert response.status_code == 200
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_fee_estimate(self, client, aggregator):
        aggregator.quotes = [raw_quote(fees=[
            {"token": ETH_WETH, "amount": "300", "type": "message", "chainKey": "ethereum"},
            {"token": ETH_WETH, "amount": "200", "type": "protocol", "chainKey": "ethereum"},
        ])]
        data = (await client.post("/bridge/fees/estimate", json=QUOTE_BODY)).json()

        assert data["success"] is True
        assert data["total"] == "500"
        assert data["message_fee"] == "300"
