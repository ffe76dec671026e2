"""
Adjustment Calculator - derives a final price from a base price.

    dynamic:  delta = round2(value / 100 * base)
    fixed:    delta = value
    increase: price = round2(base + delta)
    decrease: price = round2(base - delta)

Any mode other than ``dynamic`` is treated as fixed, and any increment other
than ``increase`` as a decrease. Callers validate enums beforehand.
"""
from decimal import Decimal
from typing import Union

from .models import AdjustmentIncrement, AdjustmentMode
from .money import Numeric, round2, to_decimal

HUNDRED = Decimal('100')


def compute_delta(
    base_price: Numeric,
    adjustment_value: Numeric,
    adjustment_mode: Union[AdjustmentMode, str],
) -> Decimal:
    """Amount to add or subtract. Percent deltas are rounded to cents."""
    base = to_decimal(base_price)
    value = to_decimal(adjustment_value)
    if adjustment_mode == AdjustmentMode.DYNAMIC:
        return round2(value / HUNDRED * base)
    return value


def compute_adjusted_price(
    base_price: Numeric,
    adjustment_value: Numeric,
    adjustment_mode: Union[AdjustmentMode, str],
    adjustment_increment: Union[AdjustmentIncrement, str],
) -> Decimal:
    """
    Compute the adjusted price for a base price and profile settings.

    Both directions combine the same delta (rounded first for dynamic mode)
    and round only the final result, so increase and decrease are symmetric.

    Args:
        base_price: Wholesale price or an upstream profile's price
        adjustment_value: Currency amount (fixed) or percentage (dynamic)
        adjustment_mode: ``fixed`` or ``dynamic``
        adjustment_increment: ``increase`` or ``decrease``

    Returns:
        Final price rounded to cents. May be negative when a decrease
        exceeds the base price.

    Raises:
        AmountOutOfRange: if the delta or the price reaches MAX_AMOUNT
    """
    base = to_decimal(base_price)
    delta = compute_delta(base, adjustment_value, adjustment_mode)
    if adjustment_increment == AdjustmentIncrement.INCREASE:
        return round2(base + delta)
    return round2(base - delta)
