"""
Fixed-point money helpers.

All monetary values are Decimals rounded to cents with half-away-from-zero
semantics, so repeated adjustments never accumulate binary float error.
Amounts must stay below ``MAX_AMOUNT`` in magnitude; that keeps every
product of two amounts within the default 28-digit decimal context.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

CENTS = Decimal('0.01')
MAX_AMOUNT = Decimal('1000000000000')

Numeric = Union[str, int, float, Decimal]


class AmountOutOfRange(ValueError):
    """A numeric amount whose magnitude is not below MAX_AMOUNT."""


def to_decimal(value: Numeric) -> Decimal:
    """
    Coerce a number or numeric string to Decimal.

    Floats go through ``str`` so that 279.06 stays 279.06 instead of its
    binary expansion. Raises ValueError for non-numeric input and
    AmountOutOfRange for amounts too large to price.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"Invalid amount: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    if abs(result) >= MAX_AMOUNT:
        raise AmountOutOfRange(f"Amount out of range: {value!r}")
    return result


def round2(value: Numeric) -> Decimal:
    """Round to 2 decimal places, halves away from zero."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    """Render a monetary Decimal with exactly two decimals."""
    return str(round2(value))
