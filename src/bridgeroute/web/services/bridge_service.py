"""Bridge web service.

Adapts the routing facade to the web contracts. Engine failures never
become HTTP errors here; they come back as empty lists or success=False.
"""

import logging
from typing import Optional

from bridgeroute.chains import ChainDescriptor, TokenDescriptor
from bridgeroute.routing.base import Quote, QuoteRequest
from bridgeroute.routing.ranker import coerce_policy, select_best
from bridgeroute.routing.service import BridgeService
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
    SupportedTokenInfo,
    SupportedTokensResponse,
    TokenChainsResponse,
    TokenInfo,
    TokenListResponse,
    TokenSearchResponse,
)

logger = logging.getLogger(__name__)


def _chain_info(chain: ChainDescriptor) -> ChainInfo:
    return ChainInfo(
        key=chain.key,
        chain_id=chain.chain_id,
        name=chain.name,
        native_symbol=chain.native_symbol,
        native_decimals=chain.native_decimals,
        chain_type=chain.chain_type,
    )


def _token_info(token: TokenDescriptor) -> TokenInfo:
    return TokenInfo(
        chain_key=token.chain_key,
        address=token.address,
        symbol=token.symbol,
        decimals=token.decimals,
        name=token.name,
        is_bridgeable=token.is_bridgeable,
        is_native=token.is_native,
        price_usd=token.price_usd,
    )


def _quote_info(quote: Quote) -> QuoteInfo:
    return QuoteInfo(**quote.to_dict())


class BridgeWebService:
    """Read-only bridge operations for the web API."""

    def __init__(self, bridge: BridgeService):
        self.bridge = bridge

    def _to_request(self, request: BridgeQuoteRequest) -> QuoteRequest:
        return QuoteRequest(
            src_chain_key=request.src_chain_key,
            dst_chain_key=request.dst_chain_key,
            src_token=request.src_token,
            dst_token=request.dst_token,
            amount=request.amount,
            src_address=request.src_address,
            dst_address=request.dst_address or request.src_address,
            slippage=request.slippage,
            src_decimals=request.src_decimals,
            dst_decimals=request.dst_decimals,
        )

    async def get_chains(self) -> ChainListResponse:
        chains = await self.bridge.list_chains()
        return ChainListResponse(
            source=self.bridge.chain_source,
            chains=[_chain_info(chain) for chain in chains],
            total=len(chains),
        )

    async def get_chain(self, chain_key: str) -> Optional[ChainInfo]:
        chain = await self.bridge.get_chain(chain_key)
        return _chain_info(chain) if chain else None

    async def get_tokens(self, chain_key: str) -> TokenListResponse:
        tokens = await self.bridge.get_tokens(chain_key)
        return TokenListResponse(
            chain_key=chain_key,
            tokens=[_token_info(token) for token in tokens],
            total=len(tokens),
        )

    async def search_tokens(self, query: str, chain_key: Optional[str] = None) -> TokenSearchResponse:
        tokens = await self.bridge.search_tokens(query, chain_key)
        return TokenSearchResponse(
            query=query,
            chain_key=chain_key,
            tokens=[_token_info(token) for token in tokens],
            total=len(tokens),
        )

    async def get_chains_for_token(self, symbol: str) -> TokenChainsResponse:
        chains = await self.bridge.get_chains_for_token(symbol)
        return TokenChainsResponse(symbol=symbol, chains=chains, total=len(chains))

    async def get_bridge_pairs(self, symbol: str) -> BridgePairsResponse:
        pairs = await self.bridge.get_bridge_pairs(symbol)
        return BridgePairsResponse(
            symbol=symbol,
            pairs=[
                BridgePairInfo(
                    symbol=pair.symbol,
                    src_chain_key=pair.src_chain_key,
                    dst_chain_key=pair.dst_chain_key,
                    src_address=pair.src_address,
                    dst_address=pair.dst_address,
                )
                for pair in pairs
            ],
            total=len(pairs),
        )

    async def check_route(
        self,
        src_chain_key: str,
        src_token: str,
        dst_chain_key: str,
        dst_token: str,
    ) -> RouteCheckResponse:
        available = await self.bridge.is_route_available(
            src_chain_key, src_token, dst_chain_key, dst_token
        )
        return RouteCheckResponse(
            src_chain_key=src_chain_key,
            src_token=src_token,
            dst_chain_key=dst_chain_key,
            dst_token=dst_token,
            available=available,
        )

    async def get_destinations(self, src_chain_key: str, src_token: str) -> DestinationsResponse:
        destinations = await self.bridge.get_available_destinations(src_chain_key, src_token)
        return DestinationsResponse(
            src_chain_key=src_chain_key,
            src_token=src_token,
            destinations={
                chain_key: [_token_info(token) for token in tokens]
                for chain_key, tokens in destinations.items()
            },
            total_chains=len(destinations),
        )

    async def get_supported_tokens(self, src_chain_key: str, dst_chain_key: str) -> SupportedTokensResponse:
        tokens = await self.bridge.get_supported_tokens(src_chain_key, dst_chain_key)
        return SupportedTokensResponse(
            src_chain_key=src_chain_key,
            dst_chain_key=dst_chain_key,
            tokens=[
                SupportedTokenInfo(
                    symbol=token.symbol,
                    src_address=token.src_address,
                    dst_address=token.dst_address,
                )
                for token in tokens
            ],
            total=len(tokens),
        )

    async def get_quotes(self, request: BridgeQuoteRequest) -> QuotesResponse:
        """Get all quotes for a transfer, plus the best one."""
        policy = coerce_policy(request.policy or self.bridge.default_policy)
        quotes = await self.bridge.get_quotes(self._to_request(request))

        if not quotes:
            return QuotesResponse(
                success=False,
                policy=policy.value,
                error=f"No bridge quotes available for {request.src_chain_key} -> {request.dst_chain_key}",
            )

        best = select_best(quotes, policy)
        return QuotesResponse(
            success=True,
            quotes=[_quote_info(quote) for quote in quotes],
            best_quote=_quote_info(best) if best else None,
            policy=policy.value,
        )

    async def get_best_quote(self, request: BridgeQuoteRequest) -> BestQuoteResponse:
        policy = coerce_policy(request.policy or self.bridge.default_policy)
        quote = await self.bridge.get_best_quote(self._to_request(request), policy)

        if quote is None:
            return BestQuoteResponse(
                success=False,
                policy=policy.value,
                error=f"No bridge quotes available for {request.src_chain_key} -> {request.dst_chain_key}",
            )
        return BestQuoteResponse(success=True, quote=_quote_info(quote), policy=policy.value)

    async def estimate_fees(self, request: BridgeQuoteRequest) -> FeeEstimateResponse:
        estimate = await self.bridge.estimate_fees(self._to_request(request))
        if estimate is None:
            return FeeEstimateResponse(success=False, error="No quote available to estimate fees from")

        return FeeEstimateResponse(
            success=True,
            message_fee=str(estimate.message_fee),
            protocol_fee=str(estimate.protocol_fee),
            total=str(estimate.total),
            fees=[
                FeeInfo(
                    token=fee.token_address,
                    amount=str(fee.amount),
                    kind=fee.kind.value,
                    chain_key=fee.chain_key,
                )
                for fee in estimate.fees
            ],
        )
