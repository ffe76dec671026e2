"""
Data models for the pricing engine.

Uses dataclasses for the three stored entities plus small value types.
``to_dict`` renders the camelCase wire shape used by the API.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional

from .money import format_money

GLOBAL_MARKER = 'Global'


class AdjustmentMode(str, Enum):
    """How an adjustment value is interpreted."""
    FIXED = 'fixed'      # absolute currency amount
    DYNAMIC = 'dynamic'  # percentage of the based price


class AdjustmentIncrement(str, Enum):
    """Direction of an adjustment."""
    INCREASE = 'increase'
    DECREASE = 'decrease'


class ProfileType(str, Enum):
    SINGLE = 'single'
    MULTIPLE = 'multiple'


@dataclass(frozen=True)
class BasedOn:
    """
    Reference a profile's prices are computed against.

    Either global (adjust from the product's wholesale price) or a specific
    pricing profile whose stored adjustment prices are used as the base.
    """
    profile_id: Optional[str] = None

    GLOBAL: ClassVar['BasedOn']

    @property
    def is_global(self) -> bool:
        return self.profile_id is None

    @classmethod
    def profile(cls, profile_id: str) -> 'BasedOn':
        return cls(profile_id=profile_id)

    @classmethod
    def parse(cls, raw: Optional[str]) -> 'BasedOn':
        """Parse a wire value: empty, None or "Global" mean global."""
        if raw is None:
            return cls.GLOBAL
        raw = str(raw).strip()
        if not raw or raw.lower() == GLOBAL_MARKER.lower():
            return cls.GLOBAL
        return cls(profile_id=raw)

    def to_wire(self) -> str:
        return GLOBAL_MARKER if self.is_global else self.profile_id

    def __str__(self) -> str:
        return self.to_wire()


BasedOn.GLOBAL = BasedOn()


@dataclass
class Product:
    """A catalog product. ``wholesale_price`` is the fallback base price."""
    id: str
    title: str
    sku: str
    category: str
    wholesale_price: Decimal
    sub_category: Optional[str] = None
    brand: Optional[str] = None
    segment: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'sku': self.sku,
            'category': self.category,
            'subCategory': self.sub_category,
            'brand': self.brand,
            'segment': self.segment,
            'wholesalePrice': format_money(self.wholesale_price),
        }


@dataclass
class PricingProfile:
    """A named policy describing how to adjust prices for a set of products."""
    id: str
    name: str
    type: ProfileType
    adjustment_mode: AdjustmentMode
    adjustment_increment: AdjustmentIncrement
    description: Optional[str] = None
    based_on: BasedOn = field(default_factory=lambda: BasedOn.GLOBAL)
    status: str = 'draft'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'type': self.type.value,
            'basedOnId': self.based_on.to_wire(),
            'adjustmentMode': self.adjustment_mode.value,
            'adjustmentIncrement': self.adjustment_increment.value,
            'status': self.status,
        }


@dataclass
class PricingAdjustment:
    """
    A computed price for one product under one profile.

    ``based_price`` is a snapshot taken at computation time; it is not
    refreshed when the upstream price changes later.
    """
    id: str
    product_id: str
    pricing_profile_id: str
    based_price: Decimal
    adjustment_value: Decimal
    price: Decimal

    @property
    def key(self) -> tuple[str, str]:
        return (self.product_id, self.pricing_profile_id)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'productId': self.product_id,
            'pricingProfileId': self.pricing_profile_id,
            'basedPrice': format_money(self.based_price),
            'adjustmentValue': str(self.adjustment_value),
            'price': format_money(self.price),
        }


@dataclass
class BasedPrice:
    """Resolved base price for a single product."""
    id: str
    based_price: Decimal

    def to_dict(self) -> dict:
        return {'id': self.id, 'basedPrice': format_money(self.based_price)}
