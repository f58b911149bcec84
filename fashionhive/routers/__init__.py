"""
FastAPI Routers Package

Catalog endpoints; all routers are included in api/index.py.
"""

from fashionhive.routers.brands import router as brands_router
from fashionhive.routers.products import router as products_router

__all__ = [
    "brands_router",
    "products_router",
]
