"""
Adjustment Service - computes, stores and queries pricing adjustments.

Upsert flow:
1. Look up the pricing profile (InvalidReference if absent)
2. Look up the product (InvalidReference if absent)
3. Resolve the based price against the profile's ``based_on``
4. Apply the profile's mode/increment to the adjustment value
5. Insert, or replace the existing (product, profile) adjustment keeping its ID
"""
import logging
import threading
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional

from ..engine.adjustment_calculator import compute_adjusted_price
from ..engine.models import (
    AdjustmentIncrement,
    AdjustmentMode,
    BasedPrice,
    PricingAdjustment,
)
from ..engine.money import MAX_AMOUNT, AmountOutOfRange, format_money, to_decimal
from ..engine.price_resolver import PriceResolver
from ..errors import InvalidReference, NotFound, ValidationError
from ..storage.memory import KeyedLock
from ..storage.repositories import (
    PricingAdjustmentRepository,
    PricingProfileRepository,
    ProductRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class PriceTableRow:
    """Previewed price for one product."""
    id: str
    based_price: Decimal
    adjustment_value: Decimal
    price: Decimal

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'basedPrice': format_money(self.based_price),
            'adjustmentValue': str(self.adjustment_value),
            'price': format_money(self.price),
        }


def _require_amount(value: Any, label: str, errors: list[str]) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        errors.append(f"{label} is required")
        return None
    try:
        return to_decimal(value)
    except AmountOutOfRange:
        errors.append(f"{label} must be below {MAX_AMOUNT} in magnitude")
    except ValueError:
        errors.append(f"{label} must be a number")
    return None


def _price_or_error(based_price: Decimal, value: Decimal, mode, increment) -> Decimal:
    try:
        return compute_adjusted_price(based_price, value, mode, increment)
    except AmountOutOfRange as exc:
        raise ValidationError(
            'Input is not valid', [f"Adjusted price must be below {MAX_AMOUNT} in magnitude"]
        ) from exc


class AdjustmentService:
    """Service for pricing adjustments."""

    def __init__(
        self,
        products: ProductRepository,
        profiles: PricingProfileRepository,
        adjustments: PricingAdjustmentRepository,
        locks: Optional[KeyedLock] = None,
        write_lock: Optional[threading.RLock] = None,
    ):
        self.products = products
        self.profiles = profiles
        self.adjustments = adjustments
        self.resolver = PriceResolver(products, adjustments)
        self.locks = locks or KeyedLock()
        # Must be the store's lock so profile deletes cannot interleave with an upsert
        self.write_lock = write_lock or threading.RLock()

    def upsert(self, pricing_profile_id: str, product_id: Any, adjustment_value: Any) -> PricingAdjustment:
        """
        Compute and store the adjustment for a (profile, product) pair.

        Raises:
            ValidationError: if an identifier or the value is missing or malformed,
                or the adjusted price is out of range
            InvalidReference: if the profile or product does not exist
        """
        errors = []
        if not pricing_profile_id:
            errors.append("pricingProfileId is required")
        if product_id is None or str(product_id).strip() == '':
            errors.append("productId is required")
        value = _require_amount(adjustment_value, "adjustmentValue", errors)
        if errors:
            raise ValidationError('Input is not valid', errors)

        product_id = str(product_id).strip()
        with self.locks.hold((product_id, pricing_profile_id)), self.write_lock:
            profile = self.profiles.get_by_id(pricing_profile_id)
            if profile is None:
                raise InvalidReference(f"Pricing profile '{pricing_profile_id}' does not exist")

            product = self.products.get_by_id(product_id)
            if product is None:
                raise InvalidReference(f"Product '{product_id}' does not exist")

            based_price = self.resolver.resolve_base_price(profile.based_on, product.id)
            price = _price_or_error(
                based_price, value, profile.adjustment_mode, profile.adjustment_increment
            )

            stored = self.adjustments.upsert(PricingAdjustment(
                id=str(uuid.uuid4()),
                product_id=product.id,
                pricing_profile_id=profile.id,
                based_price=based_price,
                adjustment_value=value,
                price=price,
            ))

        logger.info(
            "Upserted adjustment %s: product %s on profile %s, %s -> %s",
            stored.id, product.id, profile.id, format_money(based_price), format_money(price),
        )
        return stored

    def based_prices(self, based_on_id: Optional[str], product_ids: Iterable[Any]) -> list[BasedPrice]:
        """Resolve based prices for several products, omitting unknown ones."""
        return self.resolver.resolve_many(based_on_id, product_ids)

    def list_for_profile(self, pricing_profile_id: Optional[str]) -> list[dict]:
        """Adjustments of a profile, each decorated with product title, SKU and category."""
        if not pricing_profile_id:
            raise ValidationError('Input is not valid', ["pricingProfileId is required"])

        rows = []
        for adjustment in self.adjustments.find_by_profile(pricing_profile_id):
            product = self.products.get_by_id(adjustment.product_id)
            rows.append({
                **adjustment.to_dict(),
                'title': product.title if product else None,
                'sku': product.sku if product else None,
                'category': product.category if product else None,
            })
        return rows

    def delete(self, adjustment_id: str) -> None:
        if not self.adjustments.delete_by_id(adjustment_id):
            raise NotFound(f"Pricing adjustment '{adjustment_id}' not found")
        logger.info("Deleted pricing adjustment %s", adjustment_id)

    def price_table(
        self,
        adjustment_mode: Optional[str],
        adjustment_increment: Optional[str],
        items: list[dict],
    ) -> list[PriceTableRow]:
        """
        Preview prices for caller-supplied based prices without storing anything.

        Each item carries ``id``, ``basedPrice`` and ``adjustmentValue``.
        Items for unknown products are omitted.
        """
        errors = []
        if adjustment_mode not in {m.value for m in AdjustmentMode}:
            errors.append("Adjustment mode must be one of: fixed, dynamic")
        if adjustment_increment not in {i.value for i in AdjustmentIncrement}:
            errors.append("Adjustment increment must be one of: increase, decrease")

        parsed = []
        for position, item in enumerate(items, start=1):
            based = _require_amount(item.get('basedPrice'), f"Item #{position}: basedPrice", errors)
            value = _require_amount(item.get('adjustmentValue'), f"Item #{position}: adjustmentValue", errors)
            parsed.append((item.get('id'), based, value))
        if errors:
            raise ValidationError('Input is not valid', errors)

        rows = []
        for product_id, based, value in parsed:
            product = self.products.get_by_id(str(product_id)) if product_id is not None else None
            if product is None:
                continue
            rows.append(PriceTableRow(
                id=product.id,
                based_price=based,
                adjustment_value=value,
                price=_price_or_error(based, value, adjustment_mode, adjustment_increment),
            ))
        return rows
