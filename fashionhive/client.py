"""
Catalog API client

Async httpx client for the FashionHive catalog endpoints, used by the
storefront CLI. Responses are the decoded JSON envelopes.
"""

import os
from typing import Any, Optional

import httpx

from fashionhive.errors import ERROR_REQUEST_FAILED
from fashionhive.logging import get_logger

logger = get_logger(__name__)

API_URL = os.environ.get("FASHIONHIVE_API_URL", "http://localhost:5000/api")
DEFAULT_TIMEOUT = 15.0


class CatalogClientError(Exception):
    """Catalog request failed (HTTP error status or transport error)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] if response.text else ERROR_REQUEST_FAILED
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return ERROR_REQUEST_FAILED


class CatalogClient:
    """
    Thin wrapper over the catalog REST API.

    Usage:
        async with CatalogClient() as client:
            brands = await client.get_brands()
    """

    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: Optional[dict] = None) -> dict:
        clean = {k: v for k, v in (params or {}).items() if v is not None}
        try:
            response = await self._client.get(path, params=clean)
        except httpx.TimeoutException:
            logger.warning(f"Catalog request timed out: {path}")
            raise CatalogClientError("Request timed out")
        except httpx.HTTPError as e:
            logger.warning(f"Catalog request failed: {path}: {e}")
            raise CatalogClientError(f"Connection error: {e}")

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(f"Catalog API error {response.status_code} for {path}: {message}")
            raise CatalogClientError(message, response.status_code)

        return response.json()

    # ==================== BRANDS ====================

    async def get_brands(self) -> dict:
        return await self._get("/brands")

    async def get_brand(self, brand_name: str) -> dict:
        return await self._get(f"/brands/{brand_name}")

    async def get_categories(self) -> dict:
        return await self._get("/brands/categories")

    # ==================== PRODUCTS ====================

    async def get_products(self, **filters: Any) -> dict:
        """Filters: category, brand, search, minPrice, maxPrice, page, limit, sort."""
        return await self._get("/products", params=filters)

    async def get_product(self, product_id: str) -> dict:
        return await self._get(f"/products/{product_id}")

    async def get_products_by_brand(self, brand_name: str, **filters: Any) -> dict:
        return await self._get(f"/products/brand/{brand_name}", params=filters)

    async def get_featured(self, limit: int = 8) -> dict:
        return await self._get("/products/featured", params={"limit": limit})
