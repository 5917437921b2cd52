"""Pick a single quote from a candidate list."""

import logging
from typing import Optional, Sequence, Union

from bridgeroute.errors import ValidationError
from bridgeroute.routing.base import Quote, QuotePolicy

logger = logging.getLogger(__name__)


def coerce_policy(policy: Union[QuotePolicy, str]) -> QuotePolicy:
    try:
        return QuotePolicy(policy)
    except ValueError:
        raise ValidationError(
            f"Unknown quote policy {policy!r}, expected one of "
            f"{[p.value for p in QuotePolicy]}"
        )


def select_best(
    quotes: Sequence[Quote],
    policy: Union[QuotePolicy, str] = QuotePolicy.FASTEST,
) -> Optional[Quote]:
    """Select the best quote under ``policy``.

    - fastest: lowest estimated duration
    - cheapest: lowest sum of fee amounts in base units. Fees in different
      tokens are added as-is without price conversion, so this ranking is an
      approximation whenever a quote mixes fee tokens.

    Ties go to the earliest quote in provider order.

    Raises:
        ValidationError: unknown policy
    """
    policy = coerce_policy(policy)
    if not quotes:
        return None

    if policy is QuotePolicy.FASTEST:
        best = min(quotes, key=lambda q: q.estimated_duration_seconds)
    else:
        best = min(quotes, key=lambda q: q.total_fee)

    logger.debug(
        f"Selected {best.route_label} by {policy.value} "
        f"(duration={best.estimated_duration_seconds}s, fees={best.total_fee}) "
        f"from {len(quotes)} quote(s)"
    )
    return best
