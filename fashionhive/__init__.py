"""
FashionHive

Multi-brand fashion catalog and shopping cart:
- db: MongoDB (one collection per brand) and Redis clients
- services: catalog queries and the shared price rule
- routers: REST endpoints for products and brands
- cart: cart engine, storage backends and per-brand checkout
- client / cli: catalog API client and terminal storefront

Note: Imports are lazy so that importing the cart does not pull in the API.
"""

__version__ = "1.0.0"

__all__ = [
    "CartEngine",
    "get_catalog",
    "parse_price",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "CartEngine":
        from fashionhive.cart import CartEngine
        return CartEngine
    elif name == "get_catalog":
        from fashionhive.services.catalog import get_catalog
        return get_catalog
    elif name == "parse_price":
        from fashionhive.services.money import parse_price
        return parse_price
    raise AttributeError(f"module 'fashionhive' has no attribute '{name}'")
