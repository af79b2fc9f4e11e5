import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from product_mgmt.config import get_settings
from product_mgmt.database import init_db
from product_mgmt.routers.categories import router as categories_router
from product_mgmt.services.cache import cache
from product_mgmt.services.exceptions import (
    CategoryNotFoundError,
    InvalidCategoryOperationError,
    CategoryStoreError,
)

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database and cache on startup."""
    logger.info("Starting up... Initializing database")
    await init_db()
    logger.info("Connecting to Redis cache...")
    await cache.connect()
    yield
    logger.info("Shutting down...")
    await cache.disconnect()


app = FastAPI(
    title="Product Management API",
    description="Product categories for the financial products catalogue",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CategoryNotFoundError)
async def category_not_found_handler(request: Request, exc: CategoryNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidCategoryOperationError)
async def invalid_category_operation_handler(request: Request, exc: InvalidCategoryOperationError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(CategoryStoreError)
async def category_store_error_handler(request: Request, exc: CategoryStoreError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal storage error"})


# Include routers
app.include_router(categories_router, prefix=settings.api_prefix)


@app.get("/")
def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": "Product Management API",
        "version": "1.0.0"
    }
