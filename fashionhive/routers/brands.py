"""
Brands API Router

One brand per catalog collection. /categories must precede /{brand_name}.
"""

from fastapi import APIRouter, HTTPException

from fashionhive.errors import (
    ERROR_BRAND_NOT_FOUND,
    ERROR_FETCH_BRAND,
    ERROR_FETCH_BRANDS,
    ERROR_FETCH_CATEGORIES,
)
from fashionhive.logging import get_logger
from fashionhive.services.catalog import get_catalog

logger = get_logger(__name__)

router = APIRouter(prefix="/api/brands", tags=["brands"])


@router.get("")
async def get_all_brands():
    """All brands with product counts, categories and a cover image."""
    catalog = get_catalog()
    try:
        brands = await catalog.get_all_brands()
    except Exception as e:
        logger.error(f"Failed to fetch brands: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_FETCH_BRANDS)

    return {"success": True, "count": len(brands), "data": brands}


@router.get("/categories")
async def get_all_categories():
    catalog = get_catalog()
    try:
        categories = await catalog.get_categories()
    except Exception as e:
        logger.error(f"Failed to fetch categories: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_FETCH_CATEGORIES)

    return {"success": True, "count": len(categories), "data": categories}


@router.get("/{brand_name}")
async def get_brand(brand_name: str):
    catalog = get_catalog()
    try:
        brand = await catalog.get_brand(brand_name)
    except Exception as e:
        logger.error(f"Failed to fetch brand: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_FETCH_BRAND)

    if brand is None:
        raise HTTPException(status_code=404, detail=ERROR_BRAND_NOT_FOUND)

    return {"success": True, "data": brand}
