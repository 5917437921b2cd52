"""Stargate bridge aggregator HTTP client.

API docs: https://stargate.finance/api/v1 (chains, tokens, quotes)

This is the only module that talks to the aggregator. Every failure is
classified into the error taxonomy in ``bridgeroute.errors`` so callers
can decide what is cacheable:

- 400            -> ValidationError
- 422            -> UnsupportedRouteError
- timeout / 5xx  -> TransientNetworkError
- bad JSON/shape -> ProviderDataError

There are no retries; a failed call is reported once and the caller decides.
"""

import logging
from typing import Any, Optional

import httpx

from bridgeroute.errors import (
    ProviderDataError,
    TransientNetworkError,
    UnsupportedRouteError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STARGATE_API_V1 = "https://stargate.finance/api/v1"


class StargateClient:
    """Async client for the Stargate aggregator's chains/tokens/quotes endpoints."""

    def __init__(
        self,
        base_url: str = STARGATE_API_V1,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "Stargate"

    def _get_headers(self) -> dict:
        return {"Accept": "application/json"}

    async def _get(self, path: str, params: Optional[dict] = None) -> Any:
        """GET ``path`` and return the decoded JSON body."""
        url = f"{self.base_url}{path}"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=self._get_headers(),
                transport=self._transport,
            ) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            logger.warning(f"Stargate {path} timed out after {self.timeout}s")
            raise TransientNetworkError(f"Timeout calling {path}: {e}") from e
        except httpx.HTTPError as e:
            logger.warning(f"Stargate {path} transport error: {type(e).__name__}: {e}")
            raise TransientNetworkError(f"Transport error calling {path}: {e}") from e

        status = response.status_code
        if status == 400:
            logger.info(f"Stargate {path} rejected parameters: {response.text[:200]}")
            raise ValidationError(f"Bad request to {path}: {response.text[:200]}", status)
        if status == 422:
            logger.info(f"Stargate {path} reports route unsupported: {response.text[:200]}")
            raise UnsupportedRouteError(f"Unprocessable request to {path}", status)
        if status >= 500:
            logger.warning(f"Stargate {path} server error: {status}")
            raise TransientNetworkError(f"Server error {status} from {path}", status)
        if status != 200:
            logger.warning(f"Stargate {path} unexpected status: {status}")
            raise TransientNetworkError(f"Unexpected status {status} from {path}", status)

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"Stargate {path} returned non-JSON body")
            raise ProviderDataError(f"Invalid JSON from {path}") from e

    async def _get_list(self, path: str, key: str, params: Optional[dict] = None) -> list[dict]:
        data = await self._get(path, params)
        if not isinstance(data, dict):
            raise ProviderDataError(f"Expected an object from {path}, got {type(data).__name__}")

        items = data.get(key)
        if items is None:
            # some endpoints omit the key entirely when there is nothing to return
            return []
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise ProviderDataError(f"Expected '{key}' to be a list of objects from {path}")
        return items

    async def get_chains(self) -> list[dict]:
        """Fetch the raw chain listing."""
        chains = await self._get_list("/chains", "chains")
        logger.debug(f"Fetched {len(chains)} chains from Stargate")
        return chains

    async def get_tokens(
        self,
        chain_key: Optional[str] = None,
        src_chain_key: Optional[str] = None,
        src_token: Optional[str] = None,
    ) -> list[dict]:
        """Fetch raw token descriptors.

        Args:
            chain_key: Only tokens on this chain
            src_chain_key: With ``src_token``, only tokens reachable from that token
            src_token: Source token address
        """
        params = {}
        if chain_key:
            params["chainKey"] = chain_key
        if src_chain_key and src_token:
            params["srcChainKey"] = src_chain_key
            params["srcToken"] = src_token

        tokens = await self._get_list("/tokens", "tokens", params or None)
        logger.debug(f"Fetched {len(tokens)} tokens from Stargate (filter: {params or 'none'})")
        return tokens

    async def get_quotes(
        self,
        src_token: str,
        dst_token: str,
        src_address: str,
        dst_address: str,
        src_chain_key: str,
        dst_chain_key: str,
        src_amount: int,
        dst_amount_min: int,
    ) -> list[dict]:
        """Fetch raw quotes for a transfer. Amounts are in base units."""
        params = {
            "srcToken": src_token,
            "dstToken": dst_token,
            "srcAddress": src_address,
            "dstAddress": dst_address,
            "srcChainKey": src_chain_key,
            "dstChainKey": dst_chain_key,
            "srcAmount": str(src_amount),
            "dstAmountMin": str(dst_amount_min),
        }
        quotes = await self._get_list("/quotes", "quotes", params)
        logger.debug(
            f"Fetched {len(quotes)} quote(s) for {src_chain_key} -> {dst_chain_key} "
            f"(srcAmount={src_amount})"
        )
        return quotes
