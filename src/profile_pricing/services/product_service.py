"""
Product Service - catalog inserts, lookups and search.
"""
import logging
from typing import Optional

from ..data.catalog import build_products
from ..engine.models import Product
from ..errors import NotFound, ValidationError
from ..storage.repositories import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    """Service for managing the product catalog."""

    def __init__(self, products: ProductRepository):
        self.products = products

    def bulk_insert(self, records: list[dict]) -> list[Product]:
        """
        Insert products from camelCase records and return the full catalog.

        Records without an ``id`` get one assigned; records whose ``id``
        already exists replace the stored product.
        """
        if not records:
            raise ValidationError('Input is not valid', ['At least one product is required'])

        existing_ids = [p.id for p in self.products.list_all()]
        products = build_products(records, existing_ids)
        self.products.bulk_insert(products)
        logger.info("Inserted %d product(s)", len(products))
        return self.products.list_all()

    def get(self, product_id: str) -> Product:
        product = self.products.get_by_id(str(product_id))
        if product is None:
            raise NotFound(f"Product '{product_id}' not found")
        return product

    def search(
        self,
        title: Optional[str] = None,
        sku: Optional[str] = None,
        category: Optional[str] = None,
        sub_category: Optional[str] = None,
        brand: Optional[str] = None,
        segment: Optional[str] = None,
    ) -> list[Product]:
        """Search products. Title and SKU match substrings, the rest match exactly."""
        return self.products.find_all({
            'title': title,
            'sku': sku,
            'category': category,
            'sub_category': sub_category,
            'brand': brand,
            'segment': segment,
        })
