# Services Module
from .catalog import BrandNotFoundError, CatalogDatabase, get_catalog

__all__ = ["BrandNotFoundError", "CatalogDatabase", "get_catalog"]
