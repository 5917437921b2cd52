#!/usr/bin/env python3
"""Bridge route checker.

Checks route availability, reachable destinations and quotes against the
live aggregator from a terminal. Tokens may be given as addresses or as
symbols known to the static token table (USDC, USDT, WETH, ETH, ...).

Usage:
    python scripts/check_routes.py chains
    python scripts/check_routes.py check ethereum USDC arbitrum USDC
    python scripts/check_routes.py destinations ethereum USDC
    python scripts/check_routes.py supported ethereum polygon
    python scripts/check_routes.py quote ethereum USDC arbitrum USDC 100 --address 0x... [--policy cheapest]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bridgeroute.chains import NATIVE_TOKEN_ADDRESS
from bridgeroute.errors import ValidationError
from bridgeroute.routing import BridgeService, QuoteRequest, create_bridge_service, select_best
from bridgeroute.units import from_base_units

# Colors for output
GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
RESET = "\033[0m"
CHECK = "✓"
CROSS = "✗"
WARN = "⚠"

logger = logging.getLogger(__name__)


def print_status(name: str, success: bool, message: str = ""):
    """Print status with color."""
    mark = f"{GREEN}{CHECK}{RESET}" if success else f"{RED}{CROSS}{RESET}"
    print(f"  {mark} {name}" + (f" - {message}" if message else ""))


def print_warning(name: str, message: str = ""):
    """Print warning."""
    print(f"  {YELLOW}{WARN}{RESET} {name}" + (f" - {message}" if message else ""))


def resolve_token(service: BridgeService, chain_key: str, token: str) -> str:
    """Turn a symbol into an address; addresses pass through."""
    if token.startswith("0x"):
        return token

    chain = next((c for c in service.registry.fallback.list_chains() if c.key == chain_key), None)
    if chain and token.upper() == chain.native_symbol.upper():
        return NATIVE_TOKEN_ADDRESS

    address = service.registry.resolve_token_address(chain_key, token)
    if address is None:
        raise ValidationError(f"Unknown token symbol {token} on {chain_key}")
    return address


async def cmd_chains(service: BridgeService, args) -> int:
    chains = await service.list_chains()
    print(f"\nChains ({service.chain_source}):")
    for chain in chains:
        print(f"  {chain.key:<12} id={chain.chain_id:<8} {chain.name} ({chain.native_symbol})")
    return 0


async def cmd_check(service: BridgeService, args) -> int:
    src_token = resolve_token(service, args.src_chain, args.src_token)
    dst_token = resolve_token(service, args.dst_chain, args.dst_token)

    print(f"\nChecking {args.src_chain}:{args.src_token} -> {args.dst_chain}:{args.dst_token}...")
    available = await service.is_route_available(args.src_chain, src_token, args.dst_chain, dst_token)
    print_status("Route", available, "available" if available else "not available")
    return 0 if available else 1


async def cmd_destinations(service: BridgeService, args) -> int:
    src_token = resolve_token(service, args.src_chain, args.src_token)
    destinations = await service.get_available_destinations(args.src_chain, src_token)

    print(f"\nDestinations for {args.src_chain}:{args.src_token}:")
    if not destinations:
        print_warning("None found")
        return 1
    for chain_key, tokens in sorted(destinations.items()):
        symbols = ", ".join(sorted({t.symbol for t in tokens}))
        print_status(chain_key, True, symbols)
    return 0


async def cmd_supported(service: BridgeService, args) -> int:
    tokens = await service.get_supported_tokens(args.src_chain, args.dst_chain)

    print(f"\nBridgeable tokens {args.src_chain} -> {args.dst_chain}:")
    if not tokens:
        print_warning("None found")
        return 1
    for token in tokens:
        print_status(token.symbol, True, f"{token.src_address} -> {token.dst_address}")
    return 0


async def cmd_search(service: BridgeService, args) -> int:
    tokens = await service.search_tokens(args.query, args.chain)

    print(f"\nTokens matching '{args.query}':")
    if not tokens:
        print_warning("None found")
        return 1
    for token in tokens:
        print_status(f"{token.chain_key}:{token.symbol}", token.is_bridgeable, token.address)
    return 0


async def cmd_pairs(service: BridgeService, args) -> int:
    chains = await service.get_chains_for_token(args.symbol)
    pairs = await service.get_bridge_pairs(args.symbol)

    print(f"\n{args.symbol} is listed on: {', '.join(chains) or 'no chains'}")
    if not pairs:
        print_warning("No bridge pairs")
        return 1
    for pair in pairs:
        print_status(f"{pair.src_chain_key} -> {pair.dst_chain_key}", True)
    return 0


async def cmd_quote(service: BridgeService, args) -> int:
    request = QuoteRequest(
        src_chain_key=args.src_chain,
        dst_chain_key=args.dst_chain,
        src_token=resolve_token(service, args.src_chain, args.src_token),
        dst_token=resolve_token(service, args.dst_chain, args.dst_token),
        amount=args.amount,
        src_address=args.address,
        dst_address=args.recipient or args.address,
        slippage=args.slippage,
    )

    print(f"\nQuoting {args.amount} {args.src_chain}:{args.src_token} -> {args.dst_chain}:{args.dst_token}...")
    quotes = await service.get_quotes(request)
    if not quotes:
        print_status("Quotes", False, "no quotes available")
        return 1

    best = select_best(quotes, args.policy)
    dst_token = await service.registry.get_token(request.dst_chain_key, request.dst_token)
    for quote in quotes:
        received = (
            from_base_units(quote.dst_amount, dst_token.decimals) if dst_token else str(quote.dst_amount)
        )
        marker = " (best)" if best is not None and quote.route_label == best.route_label else ""
        print_status(
            f"{quote.route_label}{marker}",
            True,
            f"receive {received}, ~{quote.estimated_duration_seconds}s, "
            f"{len(quote.steps)} step(s), fees {quote.total_fee}",
        )
    return 0


COMMANDS = {
    "chains": cmd_chains,
    "check": cmd_check,
    "destinations": cmd_destinations,
    "supported": cmd_supported,
    "search": cmd_search,
    "pairs": cmd_pairs,
    "quote": cmd_quote,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check bridge routes against the aggregator")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("chains", help="List supported chains")

    check = sub.add_parser("check", help="Check whether a route exists")
    check.add_argument("src_chain")
    check.add_argument("src_token")
    check.add_argument("dst_chain")
    check.add_argument("dst_token")

    destinations = sub.add_parser("destinations", help="List reachable destinations")
    destinations.add_argument("src_chain")
    destinations.add_argument("src_token")

    supported = sub.add_parser("supported", help="List tokens bridgeable between two chains")
    supported.add_argument("src_chain")
    supported.add_argument("dst_chain")

    search = sub.add_parser("search", help="Search tokens by symbol, name or address")
    search.add_argument("query")
    search.add_argument("--chain", help="Limit to one chain key")

    pairs = sub.add_parser("pairs", help="List chain pairs a token can be bridged between")
    pairs.add_argument("symbol")

    quote = sub.add_parser("quote", help="Fetch quotes for a transfer")
    quote.add_argument("src_chain")
    quote.add_argument("src_token")
    quote.add_argument("dst_chain")
    quote.add_argument("dst_token")
    quote.add_argument("amount", help="Human-readable amount, e.g. 1.5")
    quote.add_argument("--address", required=True, help="Sender wallet address")
    quote.add_argument("--recipient", help="Recipient address (default: sender)")
    quote.add_argument("--slippage", help="Slippage fraction, e.g. 0.005")
    quote.add_argument("--policy", default="fastest", choices=["fastest", "cheapest"])

    return parser


async def main() -> int:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    service = create_bridge_service()
    try:
        return await COMMANDS[args.command](service, args)
    except ValidationError as e:
        print_status("Input", False, str(e))
        return 2


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
