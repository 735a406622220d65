"""API route modules."""

from lotledger.api.routes.batches import router as batches_router
from lotledger.api.routes.health import router as health_router
from lotledger.api.routes.products import router as products_router
from lotledger.api.routes.receiving import router as receiving_router

__all__ = [
    "batches_router",
    "health_router",
    "products_router",
    "receiving_router",
]
