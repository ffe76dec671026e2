"""
Profile Pricing Package

CRUD backend for products, pricing profiles and pricing adjustments.
Resolves a product's based price (wholesale or a chained profile's price)
and derives adjusted prices from a profile's mode/increment settings.
"""

__version__ = "1.0.0"
