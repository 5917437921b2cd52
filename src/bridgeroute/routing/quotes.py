"""Fetch and normalize bridge quotes for a real transfer amount.

"No quotes" is a normal result here: every failure (bad parameters,
unsupported route, timeout, malformed response) is logged and turned into
an empty list.
"""

import logging
from typing import Optional

from bridgeroute.errors import (
    ProviderDataError,
    TransientNetworkError,
    UnsupportedRouteError,
    ValidationError,
)
from bridgeroute.routing.base import (
    Fee,
    FeeEstimate,
    FeeKind,
    Quote,
    QuoteRequest,
    StepKind,
    TransactionStep,
)
from bridgeroute.routing.client import StargateClient
from bridgeroute.routing.discovery import RouteDiscoveryService
from bridgeroute.routing.registry import ChainRegistry
from bridgeroute.units import MAX_UINT256, SlippageLike, apply_slippage, to_base_units

logger = logging.getLogger(__name__)


def _as_amount(value, what: str) -> int:
    if isinstance(value, bool):
        raise ProviderDataError(f"Invalid {what}: {value!r}")
    try:
        amount = int(str(value))
    except (TypeError, ValueError) as e:
        raise ProviderDataError(f"Invalid {what}: {value!r}") from e
    if not 0 <= amount <= MAX_UINT256:
        raise ProviderDataError(f"Out-of-range {what}: {value!r}")
    return amount


def parse_fee(raw: dict) -> Fee:
    try:
        return Fee(
            token_address=str(raw["token"]),
            amount=_as_amount(raw["amount"], "fee amount"),
            kind=FeeKind(raw["type"]),
            chain_key=str(raw["chainKey"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ProviderDataError(f"Malformed fee: {raw!r}") from e


def parse_step(raw: dict) -> TransactionStep:
    try:
        tx = raw["transaction"]
        value = tx.get("value")
        return TransactionStep(
            kind=StepKind(raw["type"]),
            target_contract=str(tx["to"]),
            call_data=str(tx["data"]),
            native_value=_as_amount(value, "step value") if value is not None else None,
            chain_key=raw.get("chainKey"),
            sender=raw.get("sender") or tx.get("from"),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ProviderDataError(f"Malformed transaction step: {raw!r}") from e


def parse_quote(raw: dict, request: QuoteRequest, src_amount: int, slippage: SlippageLike) -> Quote:
    """Normalize one provider quote.

    ``dst_amount_min`` is recomputed from the quoted output and the caller's
    slippage tolerance: ``floor(dst_amount * (1 - slippage))``.

    Raises:
        ProviderDataError: if the quote is malformed or its steps are out of order
    """
    try:
        dst_amount = _as_amount(raw["dstAmount"], "dstAmount")
        duration = int(raw["duration"]["estimated"])
        fees = tuple(parse_fee(fee) for fee in raw.get("fees") or [])
        steps = tuple(parse_step(step) for step in raw.get("steps") or [])
        route_label = str(raw.get("route") or "unknown")
    except (KeyError, TypeError, ValueError) as e:
        raise ProviderDataError(f"Malformed quote: {raw!r}") from e

    seen_bridge = False
    for step in steps:
        if step.kind == StepKind.BRIDGE:
            seen_bridge = True
        elif seen_bridge:
            raise ProviderDataError(f"Quote {route_label} has an approval after its bridge step")

    return Quote(
        route_label=route_label,
        src_amount=_as_amount(raw.get("srcAmount", src_amount), "srcAmount"),
        dst_amount=dst_amount,
        dst_amount_min=apply_slippage(dst_amount, slippage),
        estimated_duration_seconds=max(duration, 0),
        fees=fees,
        steps=steps,
        src_chain_key=request.src_chain_key,
        dst_chain_key=request.dst_chain_key,
        src_token=request.src_token,
        dst_token=request.dst_token,
    )


class QuoteFetcher:
    """Requests full quotes and parses them into Quote records."""

    def __init__(
        self,
        client: StargateClient,
        registry: ChainRegistry,
        discovery: RouteDiscoveryService,
        default_slippage: SlippageLike = "0.005",
    ):
        self.client = client
        self.registry = registry
        self.discovery = discovery
        self.default_slippage = default_slippage

    async def _resolve_decimals(self, chain_key: str, token: str, override: Optional[int]) -> int:
        if override is not None:
            return override
        descriptor = await self.registry.get_token(chain_key, token)
        if descriptor is None:
            raise ValidationError(f"Unknown token {token} on {chain_key}, decimals required")
        return descriptor.decimals

    async def get_quotes(self, request: QuoteRequest, check_route: bool = True) -> list[Quote]:
        """Get quotes for ``request`` in provider order.

        Args:
            request: Transfer parameters (human-readable amount)
            check_route: Run route discovery first. Pass False when the
                caller has just established availability itself.

        Returns:
            Parsed quotes, or an empty list on any failure
        """
        key = request.route_key

        for chain_key in (request.src_chain_key, request.dst_chain_key):
            if not await self.registry.is_supported(chain_key):
                logger.info(f"No quotes for {key}: chain '{chain_key}' is not supported")
                return []

        if check_route:
            available = await self.discovery.is_available(
                request.src_chain_key,
                request.src_token,
                request.dst_chain_key,
                request.dst_token,
            )
            if not available:
                logger.info(f"No quotes for {key}: route not available")
                return []

        slippage = request.slippage if request.slippage is not None else self.default_slippage

        try:
            src_decimals = await self._resolve_decimals(
                request.src_chain_key, request.src_token, request.src_decimals
            )
            dst_decimals = await self._resolve_decimals(
                request.dst_chain_key, request.dst_token, request.dst_decimals
            )
            src_amount = to_base_units(request.amount, src_decimals)
            if src_amount == 0:
                raise ValidationError(f"Amount {request.amount} is below one base unit")
            requested_output = to_base_units(request.amount, dst_decimals)
            dst_amount_min = apply_slippage(requested_output, slippage)
        except ValidationError as e:
            logger.info(f"Invalid quote request for {key}: {e}")
            return []

        logger.info(
            f"Requesting quotes: {request.amount} {key} "
            f"(srcAmount={src_amount}, dstAmountMin={dst_amount_min}, slippage={slippage})"
        )

        try:
            raw_quotes = await self.client.get_quotes(
                src_token=request.src_token,
                dst_token=request.dst_token,
                src_address=request.src_address,
                dst_address=request.dst_address,
                src_chain_key=request.src_chain_key,
                dst_chain_key=request.dst_chain_key,
                src_amount=src_amount,
                dst_amount_min=dst_amount_min,
            )
            quotes = [
                parse_quote(raw, request, src_amount, slippage)
                for raw in raw_quotes
                if not raw.get("error")
            ]
        except UnsupportedRouteError:
            logger.info(f"Route {key} reported unsupported while quoting")
            self.discovery.record_unsupported(key)
            return []
        except ValidationError as e:
            logger.info(f"Quote request for {key} rejected: {e}")
            return []
        except (TransientNetworkError, ProviderDataError) as e:
            logger.warning(f"Quote request for {key} failed: {e}")
            return []

        skipped = len(raw_quotes) - len(quotes)
        if skipped:
            logger.debug(f"Skipped {skipped} quote(s) with provider errors for {key}")
        logger.info(f"Got {len(quotes)} quote(s) for {key}")
        return quotes

    async def estimate_fees(self, request: QuoteRequest) -> Optional[FeeEstimate]:
        """Fee breakdown of the provider's first (preferred) quote."""
        quotes = await self.get_quotes(request)
        if not quotes:
            return None

        quote = quotes[0]
        return FeeEstimate(
            message_fee=sum(f.amount for f in quote.fees if f.kind == FeeKind.MESSAGE),
            protocol_fee=sum(f.amount for f in quote.fees if f.kind == FeeKind.PROTOCOL),
            fees=quote.fees,
        )
