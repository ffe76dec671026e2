"""
Pricing Adjustment API - FastAPI router for computing and querying adjustments.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from .responses import success
from .schemas import AdjustmentIn, PriceTableIn
from .state import PricingServices, get_services

router = APIRouter(prefix="/api/pricing-adjustment", tags=["pricing-adjustment"])


@router.post("")
async def upsert_adjustment(body: AdjustmentIn, services: PricingServices = Depends(get_services)):
    """Compute and store the adjustment for a product under a profile."""
    adjustment = services.adjustments.upsert(
        body.pricing_profile_id, body.product_id, body.adjustment_value
    )
    return success(adjustment.to_dict())


@router.get("")
async def list_adjustments(
    pricing_profile_id: Optional[str] = Query(None, alias="pricingProfileId"),
    services: PricingServices = Depends(get_services),
):
    """List a profile's adjustments with product title, SKU and category."""
    return success(services.adjustments.list_for_profile(pricing_profile_id))


@router.get("/based-on-price")
async def get_based_on_price(
    based_on_id: Optional[str] = Query(None, alias="basedOnId"),
    product_ids: list[str] = Query(default=[], alias="productIds"),
    services: PricingServices = Depends(get_services),
):
    """Resolve based prices for products; unknown products are omitted."""
    prices = services.adjustments.based_prices(based_on_id, product_ids)
    return success([price.to_dict() for price in prices])


@router.post("/price-table")
async def preview_price_table(body: PriceTableIn, services: PricingServices = Depends(get_services)):
    """Preview adjusted prices for supplied based prices without storing them."""
    rows = services.adjustments.price_table(
        body.adjustment_mode,
        body.adjustment_increment,
        [item.model_dump(by_alias=True) for item in body.products],
    )
    return success([row.to_dict() for row in rows])


@router.delete("/{adjustment_id}")
async def delete_adjustment(adjustment_id: str, services: PricingServices = Depends(get_services)):
    """Delete a single adjustment."""
    services.adjustments.delete(adjustment_id)
    return success()
