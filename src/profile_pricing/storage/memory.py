"""
In-memory repositories.

Each ``InMemoryStore`` owns one set of collections and a shared lock, so
state lives with the application instance rather than at module level.
Product search runs over a pandas frame built from the catalog.
"""
import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Hashable, Iterator, Optional

import pandas as pd

from ..engine.models import PricingAdjustment, PricingProfile, Product
from .repositories import (
    PricingAdjustmentRepository,
    PricingProfileRepository,
    ProductRepository,
)

SUBSTRING_FILTERS = ('title', 'sku')
EXACT_FILTERS = ('category', 'sub_category', 'brand', 'segment')


class KeyedLock:
    """One mutex per key, dropped once no thread holds or waits on it."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[Hashable, list] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]


class InMemoryProductRepository(ProductRepository):

    def __init__(self, lock: threading.RLock, products: Optional[list[Product]] = None):
        self._lock = lock
        self._store: dict[str, Product] = {}
        for product in products or []:
            self._store[product.id] = product

    def get_by_id(self, product_id: str) -> Optional[Product]:
        with self._lock:
            return self._store.get(str(product_id))

    def list_all(self) -> list[Product]:
        with self._lock:
            return list(self._store.values())

    def find_all(self, filters: dict[str, str]) -> list[Product]:
        active = {key: value for key, value in filters.items() if value}
        unknown = set(active) - set(SUBSTRING_FILTERS) - set(EXACT_FILTERS)
        if unknown:
            raise ValueError(f"Unknown product filter(s): {', '.join(sorted(unknown))}")

        products = self.list_all()
        if not products or not active:
            return products

        df = pd.DataFrame(
            [{col: getattr(p, col) for col in SUBSTRING_FILTERS + EXACT_FILTERS} for p in products]
        )
        mask = pd.Series(True, index=df.index)
        for key, value in active.items():
            column = df[key].fillna('').astype(str)
            if key in SUBSTRING_FILTERS:
                mask &= column.str.contains(value, case=False, regex=False)
            else:
                mask &= column.str.lower() == value.lower()

        return [products[i] for i in df.index[mask.to_numpy()]]

    def bulk_insert(self, products: list[Product]) -> None:
        with self._lock:
            for product in products:
                self._store[product.id] = product


class InMemoryPricingAdjustmentRepository(PricingAdjustmentRepository):

    def __init__(self, lock: threading.RLock):
        self._lock = lock
        self._store: dict[str, PricingAdjustment] = {}

    def get_by_id(self, adjustment_id: str) -> Optional[PricingAdjustment]:
        with self._lock:
            return self._store.get(adjustment_id)

    def find_by_profile_and_product(
        self, profile_id: str, product_id: str
    ) -> Optional[PricingAdjustment]:
        with self._lock:
            for adjustment in self._store.values():
                if adjustment.key == (product_id, profile_id):
                    return adjustment
        return None

    def find_by_profile(self, profile_id: str) -> list[PricingAdjustment]:
        with self._lock:
            return [a for a in self._store.values() if a.pricing_profile_id == profile_id]

    def upsert(self, adjustment: PricingAdjustment) -> PricingAdjustment:
        with self._lock:
            existing = self.find_by_profile_and_product(
                adjustment.pricing_profile_id, adjustment.product_id
            )
            if existing is not None:
                adjustment = replace(adjustment, id=existing.id)
            self._store[adjustment.id] = adjustment
            return adjustment

    def delete_by_id(self, adjustment_id: str) -> bool:
        with self._lock:
            return self._store.pop(adjustment_id, None) is not None

    def delete_by_profile(self, profile_id: str) -> int:
        with self._lock:
            doomed = [a.id for a in self._store.values() if a.pricing_profile_id == profile_id]
            for adjustment_id in doomed:
                del self._store[adjustment_id]
            return len(doomed)


class InMemoryPricingProfileRepository(PricingProfileRepository):

    def __init__(self, lock: threading.RLock, adjustments: PricingAdjustmentRepository):
        self._lock = lock
        self._adjustments = adjustments
        self._store: dict[str, PricingProfile] = {}

    def get_by_id(self, profile_id: str) -> Optional[PricingProfile]:
        with self._lock:
            return self._store.get(profile_id)

    def list_all(self) -> list[PricingProfile]:
        with self._lock:
            return list(self._store.values())

    def insert(self, profile: PricingProfile) -> None:
        with self._lock:
            if profile.id in self._store:
                raise ValueError(f"Pricing profile '{profile.id}' already exists")
            self._store[profile.id] = profile

    def update(self, profile: PricingProfile) -> None:
        with self._lock:
            if profile.id not in self._store:
                raise KeyError(profile.id)
            self._store[profile.id] = profile

    def delete(self, profile_id: str) -> bool:
        with self._lock:
            if self._store.pop(profile_id, None) is None:
                return False
            self._adjustments.delete_by_profile(profile_id)
            return True


class InMemoryStore:
    """The three collections of one application instance."""

    def __init__(self, products: Optional[list[Product]] = None):
        self.lock = threading.RLock()
        self.products = InMemoryProductRepository(self.lock, products)
        self.adjustments = InMemoryPricingAdjustmentRepository(self.lock)
        self.profiles = InMemoryPricingProfileRepository(self.lock, self.adjustments)
