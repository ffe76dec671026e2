"""Shared fixtures: an in-memory store seeded with a small wine catalog."""
from decimal import Decimal

import pytest

from profile_pricing.api.state import build_services
from profile_pricing.engine.models import Product
from profile_pricing.storage.memory import InMemoryStore


def make_products():
    return [
        Product(id='1', title='High Garden Pinot Noir 2021', sku='HGVPIN216',
                category='Alcoholic Beverage', wholesale_price=Decimal('279.06'),
                sub_category='Wine', brand='High Garden', segment='Red'),
        Product(id='2', title='Koyama Methode Brut Nature NV', sku='KOYBRUNV6',
                category='Alcoholic Beverage', wholesale_price=Decimal('120.00'),
                sub_category='Wine', brand='Koyama Wines', segment='Sparkling'),
        Product(id='3', title='Plain Widget', sku='WID100',
                category='Hardware', wholesale_price=Decimal('100.00')),
    ]


@pytest.fixture
def store():
    return InMemoryStore(make_products())


@pytest.fixture
def services(store):
    return build_services(store)


def profile_data(**overrides):
    """Valid profile input in service (snake_case) form."""
    data = {
        'name': 'Retail',
        'description': 'Retail price list',
        'type': 'single',
        'based_on_id': 'Global',
        'adjustment_mode': 'dynamic',
        'adjustment_increment': 'increase',
    }
    data.update(overrides)
    return data
