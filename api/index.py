"""
FashionHive Catalog API - Main FastAPI Application

Single entry point for the catalog REST API over the per-brand collections.
Run locally with: uvicorn api.index:app --port 5000
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fashionhive.db import MONGO_DB_NAME, close_mongo
from fashionhive.errors import ERROR_INTERNAL, ERROR_INVALID_REQUEST, ERROR_ROUTE_NOT_FOUND
from fashionhive.logging import get_logger
from fashionhive.routers import brands_router, products_router
from fashionhive.services.catalog import reset_catalog

logger = get_logger(__name__)

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
DEBUG = os.environ.get("DEBUG", "").lower() in ("1", "true", "yes")


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup
    logger.info(f"FashionHive API starting (database: {MONGO_DB_NAME})")
    yield
    # Shutdown
    await close_mongo()
    reset_catalog()


app = FastAPI(
    title="FashionHive API",
    description="Unified catalog API over per-brand product collections",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(products_router)
app.include_router(brands_router)


# ==================== ERROR HANDLERS ====================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors in the {success, message} envelope."""
    message = exc.detail
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = ERROR_ROUTE_NOT_FOUND
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": ERROR_INVALID_REQUEST, "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    content = {"success": False, "message": ERROR_INTERNAL}
    if DEBUG:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "OK",
        "message": "FashionHive API is running",
        "database": MONGO_DB_NAME,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
