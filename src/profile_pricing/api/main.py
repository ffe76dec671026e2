from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config.logger import configure_logging, get_logger
from ..config.settings import Settings, get_settings
from ..data.catalog import load_seed_products
from ..errors import PricingError
from ..storage.memory import InMemoryStore
from .adjustments_api import router as adjustments_router
from .products_api import router as products_router
from .profiles_api import router as profiles_router
from .responses import failure
from .state import build_services

logger = get_logger(__name__)


async def pricing_error_handler(request: Request, exc: PricingError):
    return JSONResponse(status_code=exc.status_code, content=failure(exc.message, exc.errors))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content=failure('Input is not valid', errors))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=failure('Internal server error'))


def create_app(settings: Optional[Settings] = None, store: Optional[InMemoryStore] = None) -> FastAPI:
    """
    Build the API over its own in-memory store.

    Args:
        settings: Optional settings override
        store: Optional pre-built store; when omitted the seed catalog is loaded
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if store is None:
        seed = load_seed_products(settings.seed_catalog) if settings.load_seed else []
        store = InMemoryStore(seed)

    app = FastAPI(
        title="Profile Pricing API",
        description="Products, pricing profiles and pricing adjustments",
        version=__version__,
    )

    # Enable CORS for frontend development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.services = build_services(store)

    app.add_exception_handler(PricingError, pricing_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(products_router)
    app.include_router(profiles_router)
    app.include_router(adjustments_router)

    @app.get("/")
    async def root():
        return {"status": "online", "message": "Profile Pricing API Active"}

    logger.info("API ready with %d product(s)", len(store.products.list_all()))
    return app


app = create_app()
