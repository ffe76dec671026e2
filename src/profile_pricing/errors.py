"""
Error taxonomy for pricing operations.

Services raise these; the API layer maps each class to an HTTP status and a
failure envelope. The engine itself never raises for a missing adjustment,
which is a normal state handled by falling back to wholesale price.
"""
from typing import Optional


class PricingError(Exception):
    """Base class for all pricing errors."""

    status_code = 500

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(PricingError):
    """Required fields are missing or hold values outside their allowed sets."""

    status_code = 422


class InvalidReference(PricingError):
    """A referenced product or pricing profile does not exist."""

    status_code = 400


class NotFound(PricingError):
    """A lookup by identifier returned nothing."""

    status_code = 404
