"""
Product category API endpoints.

Thin layer over CategoryHierarchyManager. Service errors are translated to
HTTP status codes by the handlers registered in main.py.
"""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from product_mgmt.config import get_settings
from product_mgmt.database import get_db
from product_mgmt.schemas.category import Category, CategoryCreate, CategoryUpdate, CategoryPage
from product_mgmt.services.cache import cache
from product_mgmt.services.categories import CategoryHierarchyManager
from product_mgmt.services.category_store import CategoryStore

settings = get_settings()

router = APIRouter(prefix="/v1/categories", tags=["categories"])


def get_category_manager(db: AsyncSession = Depends(get_db)) -> CategoryHierarchyManager:
    """Dependency building a manager bound to the request's session."""
    return CategoryHierarchyManager(CategoryStore(db))


@router.get("/", response_model=CategoryPage)
async def list_root_categories(
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    manager: CategoryHierarchyManager = Depends(get_category_manager)
):
    """List root categories, cached."""
    cache_params = {"roots": True, "page": page, "size": size}
    cached_result = await cache.get_categories(cache_params)
    if cached_result:
        return CategoryPage(**cached_result)

    result = await manager.list_root_categories(page, size)
    await cache.set_categories(cache_params, result.model_dump(mode="json"))
    return result


@router.get("/search", response_model=CategoryPage)
async def search_categories(
    name: str = Query(..., min_length=1, description="Case-insensitive name fragment"),
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    manager: CategoryHierarchyManager = Depends(get_category_manager)
):
    """Search categories by name."""
    return await manager.search_categories(name, page, size)


@router.get("/{category_id}", response_model=Category)
async def get_category(
    category_id: UUID,
    manager: CategoryHierarchyManager = Depends(get_category_manager)
):
    """Get a single category."""
    return await manager.get_by_id(category_id)


@router.get("/{category_id}/children", response_model=CategoryPage)
async def list_child_categories(
    category_id: UUID,
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    manager: CategoryHierarchyManager = Depends(get_category_manager)
):
    """List the direct children of a category."""
    return await manager.list_child_categories(category_id, page, size)


@router.post("/", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    draft: CategoryCreate,
    manager: CategoryHierarchyManager = Depends(get_category_manager)
):
    """Create a category. Its level is derived from the parent."""
    created = await manager.create(draft)
    await cache.invalidate_categories()
    return created


@router.put("/{category_id}", response_model=Category)
async def update_category(
    category_id: UUID,
    patch: CategoryUpdate,
    manager: CategoryHierarchyManager = Depends(get_category_manager)
):
    """Replace a category's fields, including its parent."""
    updated = await manager.update(category_id, patch)
    await cache.invalidate_categories()
    return updated


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID,
    manager: CategoryHierarchyManager = Depends(get_category_manager)
):
    """Delete a category without children."""
    await manager.delete(category_id)
    await cache.invalidate_categories()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
