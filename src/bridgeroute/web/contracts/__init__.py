"""Request and response contracts for the web layer.

These Pydantic models define the bridge API for web clients. Quotes carry
unsigned transaction steps only; nothing here signs or broadcasts.
"""

from bridgeroute.web.contracts.bridge import (
    BestQuoteResponse,
    BridgePairInfo,
    BridgePairsResponse,
    BridgeQuoteRequest,
    ChainInfo,
    ChainListResponse,
    DestinationsResponse,
    FeeEstimateResponse,
    FeeInfo,
    QuoteInfo,
    QuotesResponse,
    RouteCheckResponse,
    StepInfo,
    SupportedTokenInfo,
    SupportedTokensResponse,
    TokenChainsResponse,
    TokenInfo,
    TokenListResponse,
    TokenSearchResponse,
)

__all__ = [
    # Chain and token contracts
    "ChainInfo",
    "ChainListResponse",
    "TokenInfo",
    "TokenListResponse",
    "TokenSearchResponse",
    "TokenChainsResponse",
    # Route contracts
    "RouteCheckResponse",
    "DestinationsResponse",
    "SupportedTokenInfo",
    "SupportedTokensResponse",
    "BridgePairInfo",
    "BridgePairsResponse",
    # Quote contracts
    "BridgeQuoteRequest",
    "FeeInfo",
    "StepInfo",
    "QuoteInfo",
    "QuotesResponse",
    "BestQuoteResponse",
    "FeeEstimateResponse",
]
