"""
Products API Router

Public endpoints over all brand collections.
Route order matters: /featured and /brand/{name} must precede /{product_id}.
"""

from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from fashionhive.errors import (
    ERROR_FETCH_FEATURED,
    ERROR_FETCH_PRODUCT,
    ERROR_FETCH_PRODUCTS,
    ERROR_INVALID_PRODUCT_ID,
    ERROR_PRODUCT_NOT_FOUND,
)
from fashionhive.logging import get_logger, sanitize_id_for_logging
from fashionhive.services.catalog import BrandNotFoundError, get_catalog
from fashionhive.services.queries import DEFAULT_PAGE_SIZE, DEFAULT_SORT, MAX_PAGE_SIZE

logger = get_logger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("")
async def get_all_products(
    category: Optional[str] = None,
    brand: Optional[str] = None,
    search: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort: str = DEFAULT_SORT,
):
    """Products from every brand collection, filtered, sorted and paged."""
    catalog = get_catalog()
    try:
        result = await catalog.query_products(
            category=category,
            brand=brand,
            search=search,
            min_price=min_price,
            max_price=max_price,
            sort=sort,
            page=page,
            limit=limit,
        )
    except Exception as e:
        logger.error(f"Failed to fetch products: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_FETCH_PRODUCTS)

    return {"success": True, **result}


@router.get("/featured")
async def get_featured_products(limit: int = Query(8, ge=1, le=MAX_PAGE_SIZE)):
    """Random selection spread over all brands."""
    catalog = get_catalog()
    try:
        products = await catalog.get_featured(limit)
    except Exception as e:
        logger.error(f"Failed to fetch featured products: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_FETCH_FEATURED)

    return {"success": True, "count": len(products), "data": products}


@router.get("/brand/{brand_name}")
async def get_products_by_brand(
    brand_name: str,
    category: Optional[str] = None,
    search: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort: str = DEFAULT_SORT,
):
    """Products of one brand with a brand summary."""
    catalog = get_catalog()
    try:
        result = await catalog.query_brand_products(
            brand_name,
            category=category,
            search=search,
            min_price=min_price,
            max_price=max_price,
            sort=sort,
            page=page,
            limit=limit,
        )
    except BrandNotFoundError as e:
        return JSONResponse(
            status_code=404,
            content={"success": False, "message": str(e), "availableBrands": e.available},
        )
    except Exception as e:
        logger.error(f"Failed to fetch products by brand: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_FETCH_PRODUCTS)

    return {"success": True, **result}


@router.get("/{product_id}")
async def get_product(product_id: str):
    """Single product by ObjectId, searched across all brands."""
    if not ObjectId.is_valid(product_id):
        raise HTTPException(status_code=400, detail=ERROR_INVALID_PRODUCT_ID)

    catalog = get_catalog()
    try:
        product = await catalog.get_product_by_id(product_id)
    except Exception as e:
        logger.error(f"Failed to fetch product {sanitize_id_for_logging(product_id)}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_FETCH_PRODUCT)

    if not product:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)

    return {"success": True, "data": product}
