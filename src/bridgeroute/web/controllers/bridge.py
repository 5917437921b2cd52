"""Bridge API endpoints.

All endpoints are read-only. Quotes include unsigned transaction steps that
the client signs and sends itself.
"""

from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from bridgeroute.routing.factory import create_bridge_service
from bridgeroute.web.contracts.bridge import (
    BestQuoteResponse,
    BridgePairsResponse,
    BridgeQuoteRequest,
    ChainInfo,
    ChainListResponse,
    DestinationsResponse,
    FeeEstimateResponse,
    QuotesResponse,
    RouteCheckResponse,
    SupportedTokensResponse,
    TokenChainsResponse,
    TokenListResponse,
    TokenSearchResponse,
)
from bridgeroute.web.services.bridge_service import BridgeWebService

router = APIRouter(prefix="/bridge", tags=["bridge"])


@lru_cache
def get_bridge_service() -> BridgeWebService:
    """Shared service instance (one route cache per process)."""
    return BridgeWebService(create_bridge_service())


@router.get("/chains", response_model=ChainListResponse)
async def get_chains(
    service: BridgeWebService = Depends(get_bridge_service),
) -> ChainListResponse:
    """Get supported chains.

    `source` is "live" when the list came from the aggregator and "static"
    when the built-in fallback list is being served.
    """
    return await service.get_chains()


@router.get("/chains/{chain_key}", response_model=ChainInfo)
async def get_chain(
    chain_key: str,
    service: BridgeWebService = Depends(get_bridge_service),
) -> ChainInfo:
    chain = await service.get_chain(chain_key)
    if not chain:
        raise HTTPException(status_code=404, detail=f"Chain not supported: {chain_key}")
    return chain


@router.get("/tokens", response_model=TokenListResponse)
async def get_tokens(
    chain_key: str = Query(..., description="Chain key, e.g. arbitrum"),
    service: BridgeWebService = Depends(get_bridge_service),
) -> TokenListResponse:
    return await service.get_tokens(chain_key)


@router.get("/tokens/search", response_model=TokenSearchResponse)
async def search_tokens(
    query: str = Query(..., min_length=1, description="Substring of a symbol, name or address"),
    chain_key: Optional[str] = Query(None, description="Limit the search to one chain"),
    service: BridgeWebService = Depends(get_bridge_service),
) -> TokenSearchResponse:
    """Search tokens by symbol, name or address (case-insensitive)."""
    return await service.search_tokens(query, chain_key)


@router.get("/tokens/{symbol}/chains", response_model=TokenChainsResponse)
async def get_chains_for_token(
    symbol: str,
    service: BridgeWebService = Depends(get_bridge_service),
) -> TokenChainsResponse:
    return await service.get_chains_for_token(symbol)


@router.get("/pairs", response_model=BridgePairsResponse)
async def get_bridge_pairs(
    symbol: str = Query(..., description="Token symbol, e.g. USDC"),
    service: BridgeWebService = Depends(get_bridge_service),
) -> BridgePairsResponse:
    """Get every ordered chain pair a bridgeable token can move between."""
    return await service.get_bridge_pairs(symbol)


@router.get("/routes/check", response_model=RouteCheckResponse)
async def check_route(
    src_chain: str = Query(..., description="Source chain key"),
    src_token: str = Query(..., description="Source token address"),
    dst_chain: str = Query(..., description="Destination chain key"),
    dst_token: str = Query(..., description="Destination token address"),
    service: BridgeWebService = Depends(get_bridge_service),
) -> RouteCheckResponse:
    """Check whether a bridge route exists.

    Results are cached per route for the configured TTL.
    """
    return await service.check_route(src_chain, src_token, dst_chain, dst_token)


@router.get("/destinations", response_model=DestinationsResponse)
async def get_destinations(
    src_chain: str = Query(..., description="Source chain key"),
    src_token: str = Query(..., description="Source token address"),
    service: BridgeWebService = Depends(get_bridge_service),
) -> DestinationsResponse:
    """Get bridgeable tokens reachable from a source token, grouped by chain."""
    return await service.get_destinations(src_chain, src_token)


@router.get("/supported-tokens", response_model=SupportedTokensResponse)
async def get_supported_tokens(
    src_chain: str = Query(..., description="Source chain key"),
    dst_chain: str = Query(..., description="Destination chain key"),
    service: BridgeWebService = Depends(get_bridge_service),
) -> SupportedTokensResponse:
    return await service.get_supported_tokens(src_chain, dst_chain)


@router.post("/quotes", response_model=QuotesResponse)
async def get_quotes(
    request: BridgeQuoteRequest,
    service: BridgeWebService = Depends(get_bridge_service),
) -> QuotesResponse:
    """Get all bridge quotes for a transfer.

    Returns every quote in provider order plus the best one under the
    requested policy. This is a READ-ONLY operation.
    """
    return await service.get_quotes(request)


@router.post("/quotes/best", response_model=BestQuoteResponse)
async def get_best_quote(
    request: BridgeQuoteRequest,
    service: BridgeWebService = Depends(get_bridge_service),
) -> BestQuoteResponse:
    return await service.get_best_quote(request)


@router.post("/fees/estimate", response_model=FeeEstimateResponse)
async def estimate_fees(
    request: BridgeQuoteRequest,
    service: BridgeWebService = Depends(get_bridge_service),
) -> FeeEstimateResponse:
    """Get the fee breakdown (message and protocol fees) of the preferred quote."""
    return await service.estimate_fees(request)
