"""
Abstract repositories for the three pricing entities.

Services and the engine depend only on these interfaces; the in-memory
implementations live in ``storage.memory`` and could be swapped for a real
data store.
"""
from abc import ABC, abstractmethod
from typing import Optional

from ..engine.models import PricingAdjustment, PricingProfile, Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Optional[Product]:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in insertion order."""

    @abstractmethod
    def find_all(self, filters: dict[str, str]) -> list[Product]:
        """
        Return products matching every filter.

        ``title`` and ``sku`` match case-insensitive substrings; any other
        key matches its field case-insensitively and exactly.
        """

    @abstractmethod
    def bulk_insert(self, products: list[Product]) -> None:
        """Add products, replacing any with an existing ID."""


class PricingProfileRepository(ABC):

    @abstractmethod
    def get_by_id(self, profile_id: str) -> Optional[PricingProfile]:
        """Return a profile by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[PricingProfile]:
        """Return every profile in creation order."""

    @abstractmethod
    def insert(self, profile: PricingProfile) -> None:
        """Persist a new profile."""

    @abstractmethod
    def update(self, profile: PricingProfile) -> None:
        """Replace a stored profile in place."""

    @abstractmethod
    def delete(self, profile_id: str) -> bool:
        """Delete a profile and all of its adjustments. False if absent."""


class PricingAdjustmentRepository(ABC):

    @abstractmethod
    def get_by_id(self, adjustment_id: str) -> Optional[PricingAdjustment]:
        """Return an adjustment by its ID, or None if not found."""

    @abstractmethod
    def find_by_profile_and_product(
        self, profile_id: str, product_id: str
    ) -> Optional[PricingAdjustment]:
        """Return the single adjustment for a (profile, product) pair."""

    @abstractmethod
    def find_by_profile(self, profile_id: str) -> list[PricingAdjustment]:
        """Return all adjustments of a profile."""

    @abstractmethod
    def upsert(self, adjustment: PricingAdjustment) -> PricingAdjustment:
        """
        Insert or replace by (product, profile) pair.

        An existing record keeps its ID; the stored adjustment is returned.
        """

    @abstractmethod
    def delete_by_id(self, adjustment_id: str) -> bool:
        """Delete one adjustment. False if absent."""

    @abstractmethod
    def delete_by_profile(self, profile_id: str) -> int:
        """Delete every adjustment of a profile, returning how many."""
