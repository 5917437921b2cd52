"""Conversion between human-readable token amounts and integer base units.

All results are computed exactly on integers; nothing is rounded to a
context precision before flooring. Base-unit amounts are bounded by the
uint256 range the contracts accept.
"""

from decimal import Decimal, DecimalException
from typing import Union

from bridgeroute.errors import ValidationError

MAX_UINT256 = 2**256 - 1
MAX_DECIMALS = 255  # ERC-20 decimals is a uint8

# 10**78 > MAX_UINT256, so anything with 79+ integer digits is out of range
_MAX_DIGITS = 78

AmountLike = Union[str, int, Decimal]
SlippageLike = Union[str, float, Decimal]


def _to_decimal(value: AmountLike, what: str, allow_float: bool = False) -> Decimal:
    if isinstance(value, float) and not allow_float:
        # floats would silently carry binary rounding error into base units
        raise ValidationError(f"{what} must be a string or Decimal, not float")
    try:
        result = Decimal(str(value).strip())
    except (DecimalException, ValueError):
        raise ValidationError(f"Invalid {what}: {value!r}")
    if not result.is_finite():
        raise ValidationError(f"Invalid {what}: {value!r}")
    return result


def _check_decimals(decimals: int) -> None:
    if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= MAX_DECIMALS:
        raise ValidationError(f"Invalid token decimals: {decimals!r}")


def _check_base_units(value: int, what: str = "base-unit amount") -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_UINT256:
        raise ValidationError(f"Invalid {what}: {value!r}")


def to_base_units(amount: AmountLike, decimals: int) -> int:
    """Convert a decimal amount to integer base units, truncating.

    Never rounds up, so the result is never more than the user asked for:
    ``to_base_units("1.23456789", 6) == 1234567``.

    Raises:
        ValidationError: amount is not a non-negative number, exceeds the
            uint256 range once scaled, or decimals invalid
    """
    _check_decimals(decimals)
    value = _to_decimal(amount, "amount")
    if value < 0:
        raise ValidationError(f"Amount must not be negative: {amount!r}")
    if value.is_zero():
        return 0
    if value.adjusted() + decimals >= _MAX_DIGITS:
        raise ValidationError(f"Amount {amount!r} exceeds the uint256 range at {decimals} decimals")

    _, digits, exponent = value.as_tuple()
    shift = exponent + decimals
    if shift >= 0:
        result = int("".join(map(str, digits))) * 10**shift
    else:
        kept = digits[:shift]
        result = int("".join(map(str, kept))) if kept else 0

    if result > MAX_UINT256:
        raise ValidationError(f"Amount {amount!r} exceeds the uint256 range at {decimals} decimals")
    return result


def from_base_units(value: int, decimals: int) -> str:
    """Format integer base units as a decimal string with ``decimals`` digits.

    ``from_base_units(1234567, 6) == "1.234567"``
    """
    _check_decimals(decimals)
    _check_base_units(value)

    whole, fraction = divmod(value, 10**decimals)
    if decimals == 0:
        return str(whole)
    return f"{whole}.{fraction:0{decimals}d}"


def apply_slippage(amount: int, slippage: SlippageLike) -> int:
    """Minimum acceptable output: ``floor(amount * (1 - slippage))``.

    Args:
        amount: Expected output in base units
        slippage: Tolerance as a fraction (0.005 = 0.5%), in [0, 1)
    """
    _check_base_units(amount)
    tolerance = _to_decimal(slippage, "slippage", allow_float=True)
    if tolerance < 0 or tolerance >= 1:
        raise ValidationError(f"Slippage must be in [0, 1): {slippage!r}")

    if tolerance.is_zero() or amount == 0:
        return amount
    if tolerance.adjusted() < -_MAX_DIGITS - 1:
        # amount * tolerance < 1 for every uint256 amount
        return amount - 1

    numerator, denominator = tolerance.as_integer_ratio()
    return amount * (denominator - numerator) // denominator
