"""Engine subpackage - price resolution and adjustment calculation."""
from .adjustment_calculator import compute_adjusted_price
from .models import (
    AdjustmentIncrement,
    AdjustmentMode,
    BasedOn,
    BasedPrice,
    PricingAdjustment,
    PricingProfile,
    Product,
    ProfileType,
)
from .price_resolver import PriceResolver

__all__ = [
    'AdjustmentIncrement', 'AdjustmentMode', 'BasedOn', 'BasedPrice',
    'PriceResolver', 'PricingAdjustment', 'PricingProfile', 'Product',
    'ProfileType', 'compute_adjusted_price',
]
