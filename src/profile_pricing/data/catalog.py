"""
Catalog loading - turns raw product records into Product models.

Records come from the packaged seed CSV (read with pandas) or from API
bulk inserts; both use the camelCase field names of the wire format.
"""
import logging
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from ..engine.models import Product
from ..engine.money import MAX_AMOUNT, AmountOutOfRange, to_decimal
from ..errors import ValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('title', 'sku', 'category', 'wholesalePrice')
OPTIONAL_FIELDS = ('subCategory', 'brand', 'segment')


def _clean(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _normalize_id(value: Any) -> str | None:
    value = _clean(value)
    if value is None:
        return None
    # 7 and 7.0 from loosely typed input refer to the same product
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def next_product_id(existing_ids: Iterable[str]) -> str:
    """Next integer ID after the highest numeric one, starting at 1."""
    numeric = [int(i) for i in existing_ids if str(i).isdigit()]
    return str(max(numeric) + 1) if numeric else '1'


def validate_record(record: dict, position: int) -> list[str]:
    """Return error messages for one raw product record."""
    errors = []
    for name in REQUIRED_FIELDS:
        if _clean(record.get(name)) is None:
            errors.append(f"Product #{position}: {name} is required")
    price = _clean(record.get('wholesalePrice'))
    if price is not None:
        try:
            to_decimal(price)
        except AmountOutOfRange:
            errors.append(f"Product #{position}: wholesalePrice must be below {MAX_AMOUNT} in magnitude")
        except ValueError:
            errors.append(f"Product #{position}: wholesalePrice must be a number")
    return errors


def build_products(records: list[dict], existing_ids: Iterable[str] = ()) -> list[Product]:
    """
    Validate records and build Products, assigning IDs where missing.

    Missing IDs are allocated after every explicit ID in both the batch and
    the existing catalog, so an assigned ID never collides with a later row.

    Raises:
        ValidationError: listing every invalid field across the batch
    """
    errors = []
    for position, record in enumerate(records, start=1):
        errors.extend(validate_record(record, position))
    if errors:
        raise ValidationError('Input is not valid', errors)

    ids = [_normalize_id(record.get('id')) for record in records]
    taken = set(existing_ids) | {i for i in ids if i is not None}

    products = []
    for record, product_id in zip(records, ids):
        if product_id is None:
            product_id = next_product_id(taken)
            taken.add(product_id)
            logger.info("Assigned id %s to product %s", product_id, _clean(record.get('sku')))
        products.append(Product(
            id=product_id,
            title=_clean(record['title']),
            sku=_clean(record['sku']),
            category=_clean(record['category']),
            wholesale_price=to_decimal(_clean(record['wholesalePrice'])),
            sub_category=_clean(record.get('subCategory')),
            brand=_clean(record.get('brand')),
            segment=_clean(record.get('segment')),
        ))
    return products


def load_seed_products(path: Path) -> list[Product]:
    """
    Load the seed catalog CSV.

    Args:
        path: CSV with ``id`` plus the required and optional product columns

    Returns:
        Products in file order; an empty list if the file does not exist
    """
    if not path.exists():
        logger.warning("Seed catalog not found at %s; starting with an empty catalog", path)
        return []

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.strip() for c in df.columns]
    for col in df.columns:
        df[col] = df[col].str.strip()

    products = build_products(df.to_dict(orient='records'))
    logger.info("Loaded %d seed products from %s", len(products), path.name)
    return products
