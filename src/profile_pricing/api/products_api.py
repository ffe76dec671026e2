"""
Products API - FastAPI router for the product catalog.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from .responses import success
from .schemas import ProductsIn
from .state import PricingServices, get_services

router = APIRouter(prefix="/api/products", tags=["products"])


@router.post("", status_code=201)
async def create_products(body: ProductsIn, services: PricingServices = Depends(get_services)):
    """Bulk insert products and return the full catalog."""
    records = [product.model_dump(by_alias=True) for product in body.products]
    catalog = services.products.bulk_insert(records)
    return success([product.to_dict() for product in catalog])


@router.get("/search")
async def search_products(
    title: Optional[str] = None,
    sku: Optional[str] = None,
    category: Optional[str] = None,
    sub_category: Optional[str] = Query(None, alias="subCategory"),
    brand: Optional[str] = None,
    segment: Optional[str] = None,
    services: PricingServices = Depends(get_services),
):
    """Search products. Title and SKU match substrings; other filters match exactly."""
    products = services.products.search(
        title=title,
        sku=sku,
        category=category,
        sub_category=sub_category,
        brand=brand,
        segment=segment,
    )
    return success([product.to_dict() for product in products])


@router.get("/{product_id}")
async def get_product(product_id: str, services: PricingServices = Depends(get_services)):
    """Return one product, 404 if it does not exist."""
    return success(services.products.get(product_id).to_dict())
