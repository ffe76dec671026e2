"""
Price Resolver - determines the based price an adjustment starts from.

Resolution order for a product:
1. Global reference -> product wholesale price
2. Adjustment stored for (reference profile, product) -> its price
3. Otherwise -> product wholesale price
"""
import logging
from decimal import Decimal
from typing import Iterable, Union

from ..errors import NotFound
from ..storage.repositories import PricingAdjustmentRepository, ProductRepository
from .models import BasedOn, BasedPrice, Product

logger = logging.getLogger(__name__)


class PriceResolver:
    """Resolves based prices from the product and adjustment repositories."""

    def __init__(self, products: ProductRepository, adjustments: PricingAdjustmentRepository):
        self.products = products
        self.adjustments = adjustments

    def resolve_base_price(self, based_on: Union[BasedOn, str, None], product_id: str) -> Decimal:
        """
        Resolve the based price of one product.

        Raises:
            NotFound: if the product does not exist
        """
        product = self.products.get_by_id(str(product_id))
        if product is None:
            raise NotFound(f"Product '{product_id}' not found")
        return self._resolve(self._coerce(based_on), product)

    def resolve_many(
        self, based_on: Union[BasedOn, str, None], product_ids: Iterable[str]
    ) -> list[BasedPrice]:
        """Resolve based prices in input order, skipping unknown products."""
        reference = self._coerce(based_on)
        resolved = []
        for product_id in product_ids:
            product = self.products.get_by_id(str(product_id))
            if product is None:
                logger.debug("Skipping unknown product %s", product_id)
                continue
            resolved.append(BasedPrice(id=product.id, based_price=self._resolve(reference, product)))
        return resolved

    def _resolve(self, reference: BasedOn, product: Product) -> Decimal:
        if reference.is_global:
            return product.wholesale_price

        upstream = self.adjustments.find_by_profile_and_product(reference.profile_id, product.id)
        if upstream is None:
            logger.debug(
                "No adjustment for product %s on profile %s; using wholesale price",
                product.id, reference.profile_id,
            )
            return product.wholesale_price
        return upstream.price

    @staticmethod
    def _coerce(based_on: Union[BasedOn, str, None]) -> BasedOn:
        if isinstance(based_on, BasedOn):
            return based_on
        return BasedOn.parse(based_on)
