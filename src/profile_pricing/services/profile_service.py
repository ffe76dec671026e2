"""
Profile Service - CRUD operations for pricing profiles.
Deleting a profile cascades to its pricing adjustments.
"""
import logging
import threading
import uuid
from dataclasses import dataclass, field, replace
from typing import Optional

from ..engine.models import (
    AdjustmentIncrement,
    AdjustmentMode,
    BasedOn,
    PricingAdjustment,
    PricingProfile,
    Product,
    ProfileType,
)
from ..errors import NotFound, ValidationError
from ..storage.repositories import (
    PricingAdjustmentRepository,
    PricingProfileRepository,
    ProductRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of profile validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class ProfileDetail:
    """A profile with its adjustments, each joined to its product."""
    profile: PricingProfile
    adjustments: list[tuple[PricingAdjustment, Optional[Product]]] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = self.profile.to_dict()
        data['pricingAdjustments'] = [
            {**adjustment.to_dict(), 'product': product.to_dict() if product else None}
            for adjustment, product in self.adjustments
        ]
        return data


def _check_enum(result: ValidationResult, label: str, value: Optional[str], enum_cls) -> None:
    if not value:
        result.errors.append(f"{label} is required")
        result.valid = False
    elif value not in {member.value for member in enum_cls}:
        allowed = ', '.join(member.value for member in enum_cls)
        result.errors.append(f"{label} must be one of: {allowed}")
        result.valid = False


def validate_profile(data: dict) -> ValidationResult:
    """Validate profile fields before saving."""
    result = ValidationResult(valid=True)

    if not data:
        return ValidationResult(valid=False, errors=["Profile data is required"])

    name = data.get('name')
    if not name or not str(name).strip():
        result.errors.append("Name is required")
        result.valid = False

    _check_enum(result, "Type", data.get('type'), ProfileType)
    _check_enum(result, "Adjustment mode", data.get('adjustment_mode'), AdjustmentMode)
    _check_enum(result, "Adjustment increment", data.get('adjustment_increment'), AdjustmentIncrement)

    if 'status' in data and data['status'] is not None and not str(data['status']).strip():
        result.errors.append("Status cannot be blank")
        result.valid = False

    return result


class ProfileService:
    """Service for managing pricing profiles."""

    def __init__(
        self,
        profiles: PricingProfileRepository,
        adjustments: PricingAdjustmentRepository,
        products: ProductRepository,
        write_lock: Optional[threading.RLock] = None,
    ):
        self.profiles = profiles
        self.adjustments = adjustments
        self.products = products
        self.write_lock = write_lock or threading.RLock()

    def create(self, data: dict) -> PricingProfile:
        """Create a new pricing profile with a fresh UUID and ``draft`` status by default."""
        self._ensure_valid(data)

        profile = PricingProfile(
            id=str(uuid.uuid4()),
            name=str(data['name']).strip(),
            description=data.get('description'),
            type=ProfileType(data['type']),
            based_on=BasedOn.parse(data.get('based_on_id')),
            adjustment_mode=AdjustmentMode(data['adjustment_mode']),
            adjustment_increment=AdjustmentIncrement(data['adjustment_increment']),
            status=str(data.get('status') or 'draft').strip(),
        )
        self.profiles.insert(profile)
        logger.info("Created pricing profile %s (%s)", profile.id, profile.name)
        return profile

    def update(self, profile_id: str, data: dict) -> PricingProfile:
        """
        Replace a profile's settings in place.

        Status changes only when supplied. Stored adjustments keep their
        snapshot prices; they are not recomputed.

        Raises:
            ValidationError: if a field is invalid, or ``based_on_id`` would make
                the profile depend on its own prices
            NotFound: if the profile does not exist
        """
        self._ensure_valid(data)
        based_on = BasedOn.parse(data.get('based_on_id'))

        with self.write_lock:
            current = self.profiles.get_by_id(profile_id)
            if current is None:
                raise NotFound(f"Pricing profile '{profile_id}' not found")
            if self._depends_on(based_on, profile_id):
                raise ValidationError(
                    'Input is not valid',
                    ["basedOnId cannot reference the profile itself or a profile based on it"],
                )

            profile = replace(
                current,
                name=str(data['name']).strip(),
                description=data.get('description'),
                type=ProfileType(data['type']),
                based_on=based_on,
                adjustment_mode=AdjustmentMode(data['adjustment_mode']),
                adjustment_increment=AdjustmentIncrement(data['adjustment_increment']),
                status=str(data['status']).strip() if data.get('status') else current.status,
            )
            self.profiles.update(profile)
        logger.info("Updated pricing profile %s", profile.id)
        return profile

    def get(self, profile_id: str) -> ProfileDetail:
        profile = self.profiles.get_by_id(profile_id)
        if profile is None:
            raise NotFound(f"Pricing profile '{profile_id}' not found")
        return self._detail(profile)

    def list_profiles(self) -> list[ProfileDetail]:
        return [self._detail(profile) for profile in self.profiles.list_all()]

    def delete(self, profile_id: str) -> None:
        """Delete a profile and every adjustment that references it."""
        if not self.profiles.delete(profile_id):
            raise NotFound(f"Pricing profile '{profile_id}' not found")
        logger.info("Deleted pricing profile %s and its adjustments", profile_id)

    def _detail(self, profile: PricingProfile) -> ProfileDetail:
        return ProfileDetail(
            profile=profile,
            adjustments=[
                (adjustment, self.products.get_by_id(adjustment.product_id))
                for adjustment in self.adjustments.find_by_profile(profile.id)
            ],
        )

    def _depends_on(self, based_on: BasedOn, profile_id: str) -> bool:
        """Whether following ``based_on`` upstream reaches ``profile_id``."""
        seen = set()
        current = based_on
        while not current.is_global and current.profile_id not in seen:
            if current.profile_id == profile_id:
                return True
            seen.add(current.profile_id)
            upstream = self.profiles.get_by_id(current.profile_id)
            if upstream is None:
                return False
            current = upstream.based_on
        return False

    @staticmethod
    def _ensure_valid(data: dict) -> None:
        validation = validate_profile(data)
        if not validation.valid:
            raise ValidationError('Input is not valid', validation.errors)
