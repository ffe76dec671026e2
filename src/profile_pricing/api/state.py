"""
Per-application service wiring.

``create_app`` builds one ``PricingServices`` over one ``InMemoryStore`` and
keeps it on ``app.state``; routers receive it through ``get_services``.
"""
from dataclasses import dataclass

from fastapi import Request

from ..services.adjustment_service import AdjustmentService
from ..services.product_service import ProductService
from ..services.profile_service import ProfileService
from ..storage.memory import InMemoryStore, KeyedLock


@dataclass
class PricingServices:
    store: InMemoryStore
    products: ProductService
    profiles: ProfileService
    adjustments: AdjustmentService


def build_services(store: InMemoryStore) -> PricingServices:
    return PricingServices(
        store=store,
        products=ProductService(store.products),
        profiles=ProfileService(store.profiles, store.adjustments, store.products, store.lock),
        adjustments=AdjustmentService(
            store.products, store.profiles, store.adjustments, KeyedLock(), store.lock
        ),
    )


def get_services(request: Request) -> PricingServices:
    """FastAPI dependency returning the services of the running app."""
    return request.app.state.services
