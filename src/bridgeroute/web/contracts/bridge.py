"""Bridge route and quote contracts.

Token amounts are strings of base units so that uint256-sized values
survive JSON clients that parse numbers as doubles.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from bridgeroute.routing.base import QuotePolicy


class ChainInfo(BaseModel):
    """A chain the bridge can route to or from."""

    key: str = Field(..., description="Aggregator chain key (ethereum, arbitrum, etc.)")
    chain_id: int = Field(..., description="EVM chain ID")
    name: str = Field(..., description="Chain display name")
    native_symbol: str = Field(..., description="Native currency symbol")
    native_decimals: int = Field(default=18, description="Native currency decimals")
    chain_type: str = Field(default="evm", description="Chain family")


class ChainListResponse(BaseModel):
    """Supported chains and where the list came from."""

    success: bool = True
    source: Optional[str] = Field(None, description="'live' (aggregator) or 'static' (fallback)")
    chains: list[ChainInfo] = Field(default_factory=list)
    total: int = Field(default=0)


class TokenInfo(BaseModel):
    """A token on one chain."""

    chain_key: str
    address: str = Field(..., description="Token contract address or the native sentinel")
    symbol: str
    decimals: int
    name: Optional[str] = None
    is_bridgeable: bool = True
    is_native: bool = False
    price_usd: Optional[float] = None


class TokenListResponse(BaseModel):
    success: bool = True
    chain_key: str
    tokens: list[TokenInfo] = Field(default_factory=list)
    total: int = Field(default=0)


class TokenSearchResponse(BaseModel):
    """Tokens matching a search on symbol, name or address."""

    success: bool = True
    query: str
    chain_key: Optional[str] = Field(None, description="Chain the search was limited to, if any")
    tokens: list[TokenInfo] = Field(default_factory=list)
    total: int = Field(default=0)


class TokenChainsResponse(BaseModel):
    symbol: str
    chains: list[str] = Field(default_factory=list, description="Chain keys listing the token")
    total: int = Field(default=0)


class BridgePairInfo(BaseModel):
    symbol: str
    src_chain_key: str
    dst_chain_key: str
    src_address: str
    dst_address: str


class BridgePairsResponse(BaseModel):
    """Ordered chain pairs a token can be bridged between."""

    symbol: str
    pairs: list[BridgePairInfo] = Field(default_factory=list)
    total: int = Field(default=0)


class RouteCheckResponse(BaseModel):
    """Whether a route exists between two tokens."""

    src_chain_key: str
    src_token: str
    dst_chain_key: str
    dst_token: str
    available: bool


class DestinationsResponse(BaseModel):
    """Bridgeable tokens reachable from a source token, grouped by chain."""

    src_chain_key: str
    src_token: str
    destinations: dict[str, list[TokenInfo]] = Field(default_factory=dict)
    total_chains: int = Field(default=0)


class SupportedTokenInfo(BaseModel):
    symbol: str
    src_address: str
    dst_address: str


class SupportedTokensResponse(BaseModel):
    """Tokens that can be bridged between a pair of chains."""

    src_chain_key: str
    dst_chain_key: str
    tokens: list[SupportedTokenInfo] = Field(default_factory=list)
    total: int = Field(default=0)


class BridgeQuoteRequest(BaseModel):
    """Request for bridge quotes."""

    src_chain_key: str = Field(..., description="Source chain key")
    dst_chain_key: str = Field(..., description="Destination chain key")
    src_token: str = Field(..., description="Source token address (native sentinel for gas token)")
    dst_token: str = Field(..., description="Destination token address")
    amount: Decimal = Field(..., gt=0, description="Human-readable amount, e.g. 1.5")
    src_address: str = Field(..., description="Sender wallet address")
    dst_address: Optional[str] = Field(
        None,
        description="Recipient wallet address (defaults to the sender)"
    )
    slippage: Optional[Decimal] = Field(
        None,
        ge=0,
        lt=1,
        description="Slippage tolerance as a fraction (0.005 = 0.5%)"
    )
    policy: Optional[QuotePolicy] = Field(
        None,
        description="Ranking policy: fastest or cheapest (defaults to the configured policy)"
    )
    src_decimals: Optional[int] = Field(None, ge=0, description="Override source token decimals")
    dst_decimals: Optional[int] = Field(None, ge=0, description="Override destination token decimals")


class FeeInfo(BaseModel):
    token: str
    amount: str = Field(..., description="Fee in base units of `token`")
    kind: str = Field(..., description="message or protocol")
    chain_key: str


class StepInfo(BaseModel):
    """An unsigned transaction for the wallet to sign and send."""

    kind: str = Field(..., description="approve or bridge")
    chain_key: Optional[str] = None
    sender: Optional[str] = None
    target_contract: str
    call_data: str
    native_value: Optional[str] = Field(None, description="Native value in wei")


class QuoteInfo(BaseModel):
    """A normalized bridge quote."""

    route: str
    src_chain_key: Optional[str] = None
    dst_chain_key: Optional[str] = None
    src_token: Optional[str] = None
    dst_token: Optional[str] = None
    src_amount: str
    dst_amount: str
    dst_amount_min: str
    estimated_duration_seconds: int
    fees: list[FeeInfo] = Field(default_factory=list)
    steps: list[StepInfo] = Field(default_factory=list)


class QuotesResponse(BaseModel):
    """All quotes for a request plus the best one under the requested policy."""

    success: bool
    quotes: list[QuoteInfo] = Field(default_factory=list)
    best_quote: Optional[QuoteInfo] = None
    policy: str
    error: Optional[str] = None


class BestQuoteResponse(BaseModel):
    success: bool
    quote: Optional[QuoteInfo] = None
    policy: str
    error: Optional[str] = None


class FeeEstimateResponse(BaseModel):
    """Fee breakdown of the preferred quote."""

    success: bool
    message_fee: Optional[str] = None
    protocol_fee: Optional[str] = None
    total: Optional[str] = None
    fees: list[FeeInfo] = Field(default_factory=list)
    error: Optional[str] = None
