"""
Pydantic request models.

Fields are snake_case in Python and camelCase on the wire. Most fields are
optional here so that required-field and enum checks happen in the services
and produce the same failure envelope as every other validation error.
"""
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Amount = Union[Decimal, str]
Identifier = Union[int, str]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductIn(CamelModel):
    """A product in a bulk insert. ``id`` is assigned when omitted."""
    id: Optional[Identifier] = None
    title: Optional[str] = None
    sku: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    brand: Optional[str] = None
    segment: Optional[str] = None
    wholesale_price: Optional[Amount] = None


class ProductsIn(CamelModel):
    products: list[ProductIn] = Field(default_factory=list)


class ProfileIn(CamelModel):
    """Request model for creating or updating a pricing profile."""
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    based_on_id: Optional[str] = None
    adjustment_mode: Optional[str] = None
    adjustment_increment: Optional[str] = None
    status: Optional[str] = None


class AdjustmentIn(CamelModel):
    """Request model for upserting a pricing adjustment."""
    pricing_profile_id: Optional[str] = None
    product_id: Optional[Identifier] = None
    adjustment_value: Optional[Amount] = None


class PriceTableItem(CamelModel):
    id: Optional[Identifier] = None
    based_price: Optional[Amount] = None
    adjustment_value: Optional[Amount] = None


class PriceTableIn(CamelModel):
    """Request model for previewing prices without storing them."""
    adjustment_mode: Optional[str] = None
    adjustment_increment: Optional[str] = None
    products: list[PriceTableItem] = Field(default_factory=list)
